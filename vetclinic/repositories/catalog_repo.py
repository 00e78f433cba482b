from vetclinic.models import ServicesCategory, ClinicService
from vetclinic.repositories.base import BaseRepository


class CategoryRepository(BaseRepository):
    model = ServicesCategory

    def get_by_name(self, name):
        return self.find_one_by(name=name)


class ClinicServiceRepository(BaseRepository):
    model = ClinicService

    def get_by_name(self, name):
        return self.find_one_by(name=name)

    def get_many(self, service_ids):
        """Map each requested id to its row, ``None`` for ids that do not resolve."""
        rows = self.query().filter(ClinicService.id.in_(service_ids)).all() if service_ids else []
        found = {row.id: row for row in rows}
        return {service_id: found.get(service_id) for service_id in service_ids}
