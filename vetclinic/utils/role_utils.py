# vetclinic/utils/role_utils.py
from vetclinic.models.user_model import Role

# Interface sections and actions available to each role
ROLE_PERMISSIONS = {
    Role.USER: {
        'interface_sections': [
            'profile', 'services', 'doctors', 'pets', 'requests', 'appointments'
        ],
        'actions': [
            'manage_own_pets', 'create_request', 'view_own_requests',
            'view_own_appointments', 'cancel_own_appointment'
        ]
    },
    Role.DOCTOR: {
        'interface_sections': [
            'profile', 'schedule', 'medicine_cards'
        ],
        'actions': [
            'view_own_schedule', 'manage_medicine_cards'
        ]
    },
    Role.MANAGER: {
        'interface_sections': [
            'profile', 'requests', 'appointments'
        ],
        'actions': [
            'view_all_requests', 'update_request_status', 'create_appointment',
            'view_statuses'
        ]
    },
    Role.ADMIN: {
        'interface_sections': [
            'profile', 'categories', 'services', 'posts', 'doctors'
        ],
        'actions': [
            'manage_categories', 'manage_services', 'manage_posts', 'manage_doctors'
        ]
    }
}

ANONYMOUS_PERMISSIONS = {
    'interface_sections': ['login', 'register', 'services', 'doctors'],
    'actions': []
}


def get_role_permissions(role):
    """Get permissions of a role, anonymous ones for an unknown role"""
    return ROLE_PERMISSIONS.get(role, ANONYMOUS_PERMISSIONS)


def can_perform_action(role, action):
    """Check if the role can perform a specific action"""
    return action in get_role_permissions(role)['actions']


def get_principal_permissions(principal):
    """Return principal data together with its permissions"""
    try:
        role = Role(principal.get('role'))
    except ValueError:
        role = None
    return {
        'id': principal.get('id'),
        'email': principal.get('email'),
        'role': role.value if role else None,
        'permissions': get_role_permissions(role)
    }
