# vetclinic/routes/__init__.py
from vetclinic.routes.user_routes import user_ns
from vetclinic.routes.admin_routes import admin_ns
from vetclinic.routes.client_routes import client_ns
from vetclinic.routes.doctor_routes import doctor_ns
from vetclinic.routes.manager_routes import manager_ns


def register_namespaces(api):
    api.add_namespace(user_ns)
    api.add_namespace(admin_ns)
    api.add_namespace(client_ns)
    api.add_namespace(doctor_ns)
    api.add_namespace(manager_ns)
