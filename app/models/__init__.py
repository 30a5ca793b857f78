# Carrega módulos para registrar tabelas no metadata:
from app.models.user_type import UserType        # noqa: F401
from app.models.user import User, UserStatus     # noqa: F401
from app.models.workshop import Workshop, WorkshopStatus  # noqa: F401
from app.models.payment import Payment           # noqa: F401
from app.models.qr_code import QrCode            # noqa: F401
from app.models.attendance import Attendance     # noqa: F401
