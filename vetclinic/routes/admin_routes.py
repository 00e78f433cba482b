from flask_restx import Namespace, Resource, fields

from vetclinic import db
from vetclinic.services.catalog_service import CategoryService, PostService, ServiceCatalog
from vetclinic.services.doctor_service import DoctorService
from vetclinic.utils.util import get_json_body, permission_required

admin_ns = Namespace('admin', description='Справочники клиники: категории, услуги, должности, ветеринары',
                     path='/admin')

name_model = admin_ns.model('NamedEntity', {
    'name': fields.String(required=True)
})

service_model = admin_ns.model('ClinicService', {
    'name': fields.String(required=True),
    'price': fields.Float(required=True),
    'description': fields.String(),
    'category_id': fields.Integer(required=True)
})

doctor_model = admin_ns.model('DoctorInput', {
    'fio': fields.String(required=True),
    'phone': fields.String(required=True),
    'email': fields.String(required=True),
    'password': fields.String(required=True),
    'experience': fields.Integer(required=True, description='Стаж, лет'),
    'post_id': fields.Integer(required=True)
})


@admin_ns.route('/category')
class CategoryList(Resource):
    @permission_required('manage_categories')
    @admin_ns.doc(security='BearerAuth')
    def get(self):
        """Список категорий услуг"""
        return {'categories': CategoryService(db.session).list_all()}, 200

    @permission_required('manage_categories')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(name_model)
    def post(self):
        """Создание категории услуг"""
        return {'category': CategoryService(db.session).create(get_json_body())}, 201


@admin_ns.route('/category/<int:category_id>')
class CategoryItem(Resource):
    @permission_required('manage_categories')
    @admin_ns.doc(security='BearerAuth')
    def get(self, category_id):
        return {'category': CategoryService(db.session).get(category_id)}, 200

    @permission_required('manage_categories')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(name_model)
    def put(self, category_id):
        return {'category': CategoryService(db.session).update(category_id, get_json_body())}, 200

    @permission_required('manage_categories')
    @admin_ns.doc(security='BearerAuth')
    def delete(self, category_id):
        CategoryService(db.session).delete(category_id)
        return {'message': f'Категория с идентификатором {category_id} удалена'}, 200


@admin_ns.route('/service')
class ServiceList(Resource):
    @permission_required('manage_services')
    @admin_ns.doc(security='BearerAuth')
    def get(self):
        """Список услуг клиники"""
        return {'services': ServiceCatalog(db.session).list_services()}, 200

    @permission_required('manage_services')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(service_model)
    def post(self):
        """Создание услуги в существующей категории"""
        return {'service': ServiceCatalog(db.session).create_service(get_json_body())}, 201


@admin_ns.route('/service/<int:service_id>')
class ServiceItem(Resource):
    @permission_required('manage_services')
    @admin_ns.doc(security='BearerAuth')
    def get(self, service_id):
        return {'service': ServiceCatalog(db.session).get_service(service_id)}, 200

    @permission_required('manage_services')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(service_model)
    def put(self, service_id):
        return {'service': ServiceCatalog(db.session).update_service(service_id, get_json_body())}, 200

    @permission_required('manage_services')
    @admin_ns.doc(security='BearerAuth')
    def delete(self, service_id):
        ServiceCatalog(db.session).delete_service(service_id)
        return {'message': f'Услуга с идентификатором {service_id} удалена'}, 200


@admin_ns.route('/post')
class PostList(Resource):
    @permission_required('manage_posts')
    @admin_ns.doc(security='BearerAuth')
    def get(self):
        """Список должностей"""
        return {'posts': PostService(db.session).list_all()}, 200

    @permission_required('manage_posts')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(name_model)
    def post(self):
        return {'post': PostService(db.session).create(get_json_body())}, 201


@admin_ns.route('/post/<int:post_id>')
class PostItem(Resource):
    @permission_required('manage_posts')
    @admin_ns.doc(security='BearerAuth')
    def get(self, post_id):
        return {'post': PostService(db.session).get(post_id)}, 200

    @permission_required('manage_posts')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(name_model)
    def put(self, post_id):
        return {'post': PostService(db.session).update(post_id, get_json_body())}, 200

    @permission_required('manage_posts')
    @admin_ns.doc(security='BearerAuth')
    def delete(self, post_id):
        PostService(db.session).delete(post_id)
        return {'message': f'Должность с идентификатором {post_id} удалена'}, 200


@admin_ns.route('/doctor')
class DoctorList(Resource):
    @permission_required('manage_doctors')
    @admin_ns.doc(security='BearerAuth')
    def get(self):
        """Список ветеринаров с профилями"""
        return {'doctors': DoctorService(db.session).list_doctors()}, 200

    @permission_required('manage_doctors')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(doctor_model)
    def post(self):
        """Создание учётной записи ветеринара вместе с профилем"""
        return {'doctor': DoctorService(db.session).create_doctor(get_json_body())}, 201


@admin_ns.route('/doctor/<int:user_id>')
@admin_ns.param('user_id', 'Идентификатор пользователя-ветеринара')
class DoctorItem(Resource):
    @permission_required('manage_doctors')
    @admin_ns.doc(security='BearerAuth')
    def get(self, user_id):
        return {'doctor': DoctorService(db.session).get_doctor(user_id)}, 200

    @permission_required('manage_doctors')
    @admin_ns.doc(security='BearerAuth')
    @admin_ns.expect(doctor_model)
    def put(self, user_id):
        return {'doctor': DoctorService(db.session).update_doctor(user_id, get_json_body())}, 200

    @permission_required('manage_doctors')
    @admin_ns.doc(security='BearerAuth')
    def delete(self, user_id):
        """Удаление профиля ветеринара и его учётной записи"""
        DoctorService(db.session).delete_doctor(user_id)
        return {'message': f'Ветеринар с идентификатором {user_id} удалён'}, 200
