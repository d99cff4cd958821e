import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError as DRFValidation

from records.models import Department, DepartmentMember
from records.services.audit import log_action

User = get_user_model()
logger = logging.getLogger(__name__)

DEPARTMENTS = [
    ('administration', 'Administration'),
    ('maternite', 'Maternité'),
    ('medecine', 'Médecine'),
    ('pharmacie', 'Pharmacie'),
    ('laboratoire', 'Laboratoire'),
    ('vaccination', 'Vaccination'),
    ('nutrition', 'Nutrition'),
    ('salle_operation', "Salle d'Opération"),
    ('gestion', 'Gestion'),
]


def serialize_department(d: Department) -> dict:
    return {'id': d.id, 'slug': d.slug, 'name': d.name}


def serialize_user(u) -> dict:
    return {
        'id': u.id,
        'username': u.username,
        'fullName': u.get_full_name() or u.username,
        'email': u.email,
        'phoneNumber': u.phone_number,
        'role': u.role,
        'roleLabel': u.get_role_display(),
        'isActive': u.is_active,
        'createdAt': u.date_joined.isoformat() if u.date_joined else None,
        'departments': [serialize_department(d) for d in u.departments.all()],
    }


def ensure_departments() -> int:
    """Create the reference departments that are missing; return how many were added."""
    created = 0
    for slug, name in DEPARTMENTS:
        _, was_created = Department.objects.get_or_create(slug=slug, defaults={'name': name})
        created += int(was_created)
    return created


@transaction.atomic
def create_staff_user(actor, *, username, password, full_name, email='', phone_number='', role='other',
                      department_slug):
    department = Department.objects.filter(slug=department_slug).first()
    if department is None:
        raise DRFValidation({'department': ['département inconnu']})
    if User.objects.filter(username=username).exists():
        raise DRFValidation({'username': ["ce nom d'utilisateur existe déjà"]})
    try:
        validate_password(password)
    except ValidationError as e:
        raise DRFValidation({'password': e.messages})

    user = User.objects.create_user(username=username, password=password, email=email,
                                    first_name=full_name, phone_number=phone_number, role=role)
    DepartmentMember.objects.create(user=user, department=department)
    log_action(user=actor, action='user_create', object_type='user', object_id=user.id,
               detail={'role': role, 'department': department.slug})
    logger.info('user %s created in %s by %s', user.username, department.slug, actor.username)
    return user


def get_user_or_404(user_id: int):
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise NotFound('user not found')
    return user


def set_user_active(actor, user, is_active: bool):
    if user.pk == actor.pk and not is_active:
        raise PermissionDenied('vous ne pouvez pas désactiver votre propre compte')
    user.is_active = is_active
    user.save(update_fields=['is_active'])
    log_action(user=actor, action='user_activate' if is_active else 'user_deactivate',
               object_type='user', object_id=user.id)
    logger.info('user %s active=%s (by %s)', user.username, is_active, actor.username)
    return user


# profile fields an administrator may edit, wire key -> model attribute
PROFILE_FIELDS = {
    'fullName': 'first_name',
    'phoneNumber': 'phone_number',
    'email': 'email',
    'role': 'role',
}


@transaction.atomic
def update_staff_user(actor, user, changes: dict):
    """Apply profile changes (name, phone, e-mail, role) given by wire key."""
    if user.pk == actor.pk and changes.get('role', user.role) != user.role:
        raise PermissionDenied('vous ne pouvez pas modifier votre propre rôle')
    fields = []
    for key, attr in PROFILE_FIELDS.items():
        if key in changes:
            setattr(user, attr, changes[key])
            fields.append(attr)
    if fields:
        user.save(update_fields=fields)
        log_action(user=actor, action='user_update', object_type='user', object_id=user.id,
                   detail={'fields': sorted(k for k in changes if k in PROFILE_FIELDS)})
        logger.info('user %s updated (%s) by %s', user.username, ', '.join(fields), actor.username)
    return user


@transaction.atomic
def assign_department(actor, user, department_slug: str):
    department = Department.objects.filter(slug=department_slug).first()
    if department is None:
        raise DRFValidation({'department': ['département inconnu']})
    if DepartmentMember.objects.filter(user=user, department=department).exists():
        raise DRFValidation({'department': ["l'utilisateur est déjà affecté à ce département"]})
    DepartmentMember.objects.create(user=user, department=department)
    log_action(user=actor, action='department_assign', object_type='user', object_id=user.id,
               detail={'department': department.slug})
    logger.info('user %s assigned to %s by %s', user.username, department.slug, actor.username)
    return user


@transaction.atomic
def remove_department(actor, user, department_slug: str):
    deleted, _ = DepartmentMember.objects.filter(user=user, department__slug=department_slug).delete()
    if not deleted:
        raise NotFound('affectation introuvable')
    log_action(user=actor, action='department_remove', object_type='user', object_id=user.id,
               detail={'department': department_slug})
    logger.info('user %s removed from %s by %s', user.username, department_slug, actor.username)
    return user
