from models.users import User
from models.sesiones import Sesion
from models.medicamentos import Medicamento
from models.metodo_reenvasado import MetodoReenvasado
from models.medicamento_metodo import MedicamentoMetodo
from models.actividad_reenvasado import ActividadReenvasado

__all__ = ['ActividadReenvasado', 'Medicamento', 'MedicamentoMetodo', 'MetodoReenvasado', 'Sesion', 'User',]
