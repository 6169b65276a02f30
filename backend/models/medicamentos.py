from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database import Base


class Medicamento(Base):
    __tablename__ = "medicamentos"

    # SAP code from the hospital inventory system, not generated here
    codigo_sap = Column(Integer, primary_key=True, index=True, autoincrement=False)
    nombre_medicamento = Column(String, nullable=False, index=True)
    principio_activo = Column(String, nullable=True)

    metodos = relationship(
        "MedicamentoMetodo",
        back_populates="medicamento",
        cascade="all, delete-orphan",
        order_by="MedicamentoMetodo.metodo_id",
    )
