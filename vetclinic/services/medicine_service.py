# Medicine card service module for business logic
import logging

from vetclinic.errors import NotFoundError
from vetclinic.models import MedicineCard
from vetclinic.repositories import MedicineCardRepository, PetRepository
from vetclinic.services.base_service import BaseService
from vetclinic.utils.validation import (
    ValidationResult, is_date, is_identifier, is_non_empty_string, parse_date, to_int
)

logger = logging.getLogger(__name__)


def format_card(card):
    return {
        'id': card.id,
        'reason': card.reason,
        'description': card.description,
        'visit_date': card.visit_date.isoformat(),
        'pet_id': card.pet_id
    }


def check_card_fields(data, result, partial=False):
    def supplied(field):
        return not partial or data.get(field) is not None

    if supplied('reason'):
        result.check(is_non_empty_string(data.get('reason')), 'Некорректно указана причина приема!')
    if supplied('description'):
        result.check(is_non_empty_string(data.get('description')), 'Некорректно указано описание приема!')
    if supplied('visit_date'):
        result.check(is_date(data.get('visit_date')),
                     'Некорректно указана дата приема. Корректный формат даты: YYYY-MM-DD!')
    if supplied('pet_id'):
        result.check(is_identifier(data.get('pet_id')), 'Некорректно указан идентификатор питомца!')


class MedicineCardService(BaseService):
    """Any doctor may read and write the cards of any pet."""

    def __init__(self, session, cards=None, pets=None):
        super().__init__(session)
        self.cards = cards or MedicineCardRepository(session)
        self.pets = pets or PetRepository(session)

    def _get_pet(self, pet_id):
        pet = self.pets.get_by_id(to_int(pet_id))
        if not pet:
            raise NotFoundError(f'Питомца с идентификатором {pet_id} не найдено!')
        return pet

    def _get_or_404(self, card_id):
        card = self.cards.get_by_id(card_id)
        if not card:
            raise NotFoundError(f'Медицинской карты с номером {card_id} не существует!')
        return card

    def create_card(self, data):
        result = ValidationResult()
        check_card_fields(data, result)
        result.raise_if_invalid()
        pet = self._get_pet(data['pet_id'])

        with self.atomic():
            card = self.cards.add(MedicineCard(
                reason=data['reason'].strip(),
                description=data['description'].strip(),
                visit_date=parse_date(data['visit_date']),
                pet_id=pet.id
            ))
        logger.info(f"Created medicine card {card.id} for pet {pet.id}")
        return format_card(card)

    def list_cards(self):
        return [format_card(c) for c in self.cards.list_all()]

    def list_pet_cards(self, pet_id):
        result = ValidationResult()
        result.check(is_identifier(pet_id), 'Некорректно указан идентификатор питомца!')
        result.raise_if_invalid()
        pet = self._get_pet(pet_id)
        return [format_card(c) for c in self.cards.list_by_pet(pet.id)]

    def get_card(self, card_id):
        return format_card(self._get_or_404(card_id))

    def update_card(self, card_id, data):
        result = ValidationResult()
        check_card_fields(data, result, partial=True)
        result.raise_if_invalid()
        card = self._get_or_404(card_id)

        changes = {}
        for field in ('reason', 'description'):
            if data.get(field) is not None and data[field].strip() != getattr(card, field):
                changes[field] = data[field].strip()
        if data.get('visit_date') is not None and parse_date(data['visit_date']) != card.visit_date:
            changes['visit_date'] = parse_date(data['visit_date'])
        if data.get('pet_id') is not None and to_int(data['pet_id']) != card.pet_id:
            changes['pet_id'] = self._get_pet(data['pet_id']).id
        if not changes:
            return format_card(card)

        with self.atomic():
            for field, value in changes.items():
                setattr(card, field, value)
        return format_card(card)

    def delete_card(self, card_id):
        card = self._get_or_404(card_id)
        with self.atomic():
            self.cards.delete(card)
        logger.info(f"Deleted medicine card {card_id}")
