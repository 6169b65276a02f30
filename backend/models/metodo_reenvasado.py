from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database import Base


class MetodoReenvasado(Base):
    __tablename__ = "metodo_reenvasado"

    id = Column(Integer, primary_key=True, index=True)
    tipo_reenvasado = Column(String, unique=True, nullable=False)  # e.g. "Blister", "Sachet"

    medicamentos = relationship("MedicamentoMetodo", back_populates="metodo_reenvasado")
