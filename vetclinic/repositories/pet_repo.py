from vetclinic.models import ClientPet, MedicineCard
from vetclinic.repositories.base import BaseRepository


class PetRepository(BaseRepository):
    model = ClientPet

    def list_by_owner(self, user_id):
        return self.query().filter_by(user_id=user_id).order_by(ClientPet.id).all()


class MedicineCardRepository(BaseRepository):
    model = MedicineCard

    def list_by_pet(self, pet_id):
        return self.query().filter_by(pet_id=pet_id).order_by(MedicineCard.visit_date, MedicineCard.id).all()
