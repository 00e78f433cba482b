from vetclinic.models import User, Doctor, Post, Role
from vetclinic.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    model = User

    def get_by_email(self, email):
        return self.find_one_by(email=email)

    def get_by_phone(self, phone):
        return self.find_one_by(phone=phone)

    def list_by_role(self, role):
        return self.query().filter_by(role=role).order_by(User.id).all()

    def list_doctors(self):
        return self.list_by_role(Role.DOCTOR)


class DoctorRepository(BaseRepository):
    model = Doctor

    def get_by_user_id(self, user_id):
        return self.find_one_by(user_id=user_id)


class PostRepository(BaseRepository):
    model = Post

    def get_by_name(self, name):
        return self.find_one_by(name=name)
