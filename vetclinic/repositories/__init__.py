from vetclinic.repositories.base import BaseRepository
from vetclinic.repositories.user_repo import UserRepository, DoctorRepository, PostRepository
from vetclinic.repositories.catalog_repo import CategoryRepository, ClinicServiceRepository
from vetclinic.repositories.pet_repo import PetRepository, MedicineCardRepository
from vetclinic.repositories.request_repo import StatusRepository, RequestRepository, AppointmentRepository
