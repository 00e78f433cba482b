from vetclinic.models.user_model import User, Role
from vetclinic.models.doctor_model import Doctor, Post
from vetclinic.models.pet_model import ClientPet, PetSex
from vetclinic.models.medicine_card_model import MedicineCard
from vetclinic.models.relationship_model import services_request
from vetclinic.models.catalog_model import ServicesCategory, ClinicService
from vetclinic.models.request_model import ClientRequest, Status
from vetclinic.models.appointment_model import Appointment
