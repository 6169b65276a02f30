from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import relationship
from database import Base


class MedicamentoMetodo(Base):
    """Join relation: which repackaging methods apply to which medication."""
    __tablename__ = "medicamento_metodo"

    codigo_sap = Column(Integer, ForeignKey("medicamentos.codigo_sap", ondelete="CASCADE"), primary_key=True)
    metodo_id = Column(Integer, ForeignKey("metodo_reenvasado.id", ondelete="CASCADE"), primary_key=True)

    medicamento = relationship("Medicamento", back_populates="metodos")
    metodo_reenvasado = relationship("MetodoReenvasado", back_populates="medicamentos", lazy="joined")

    @property
    def tipo_reenvasado(self):
        return self.metodo_reenvasado.tipo_reenvasado if self.metodo_reenvasado else None
