# app/model_registry/__init__.py


# Register all models here

# User models
from app.users.user_models.user_model import User
from app.users.auth_token_model.token_model import Token

# System models
from app.system_models.availability_model.availability_model import DoctorAvailability
from app.system_models.appointment_model.appointment_model import Appointment
from app.system_models.notification_model.notification_model import Notification
from app.system_models.concern_model.concern_model import Concern
from app.system_models.referral_model.referral_model import Referral
from app.system_models.prescription_model.prescription_model import Prescription
from app.system_models.medicine_model.medicine_model import Medicine, Order, OrderMedicine
