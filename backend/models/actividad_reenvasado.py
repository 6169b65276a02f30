from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from database import Base
from utils.formatting import now_local


class ActividadReenvasado(Base):
    """
    One repackaging event. Rows are immutable once created and always belong
    to the user that recorded them (user_id comes from the session, never
    from the request body).
    """
    __tablename__ = "actividad_reenvasado"
    __table_args__ = (
        CheckConstraint("cantidad > 0", name="ck_actividad_cantidad_positiva"),
        CheckConstraint("cantidad_final >= 0 AND cantidad_final <= cantidad", name="ck_actividad_cantidad_final_rango"),
        CheckConstraint("caducidad_reenvasado >= caducidad_original", name="ck_actividad_caducidades"),
    )

    id = Column(Integer, primary_key=True, index=True)
    fecha = Column(DateTime(timezone=True), default=now_local, nullable=False, index=True)
    codigo_sap = Column(Integer, ForeignKey("medicamentos.codigo_sap"), nullable=False, index=True)
    metodo_id = Column(Integer, ForeignKey("metodo_reenvasado.id"), nullable=False)
    cantidad = Column(Integer, nullable=False)
    cantidad_final = Column(Integer, nullable=False)
    lote_original = Column(String, nullable=False)
    caducidad_original = Column(Date, nullable=False)
    caducidad_reenvasado = Column(Date, nullable=False)
    incidencias = Column(String(255), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    medicamento = relationship("Medicamento")
    metodo_reenvasado = relationship("MetodoReenvasado")
