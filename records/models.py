"""
Database models for the hospital records backend.

Every record model mirrors one table of the department registers kept
by the maternity and medicine wards.  Fields are plain scalars; the
only derived value (an appointment's display status) is computed at
read time in :mod:`records.services.appointments` and never stored.

Timestamps are stored in UTC.  Conversion to the hospital's GMT+3 wall
clock happens in :mod:`records.services.localtime`.
"""
from __future__ import annotations

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class Department(models.Model):
    """A hospital department (maternité, médecine, ...).

    Users are assigned to departments through :class:`DepartmentMember`;
    membership gates access to the department's registers.
    """
    slug = models.SlugField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"


class User(AbstractUser):
    """Custom user model with a staff role.

    The ``admin`` role manages users and may open every register; the
    other roles only describe the person's job and rely on department
    membership for access.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrateur'),
        ('doctor', 'Docteur'),
        ('nurse', 'Infirmier'),
        ('midwife', 'Sage-femme'),
        ('pharmacist', 'Pharmacien'),
        ('lab_technician', 'Technicien de Laboratoire'),
        ('secretary', 'Secrétaire'),
        ('major', 'Major'),
        ('manager', 'Gestionnaire'),
        ('cashier', 'Caisse'),
        ('surgeon', 'Chirurgien'),
        ('accountant', 'Comptable'),
        ('anesthetist', 'Anesthésiste'),
        ('other', 'Autre'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='other', db_index=True)
    phone_number = models.CharField(max_length=32, blank=True)
    departments = models.ManyToManyField(
        Department, through='DepartmentMember', related_name='users', blank=True
    )

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class DepartmentMember(models.Model):
    """Links a user to a department."""
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='department_memberships')
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('department', 'user')]

    def __str__(self) -> str:
        return f"{self.user} in {self.department}"


class TrackedRecord(models.Model):
    """Audit columns shared by every register.

    ``updated_at`` stays empty until the first edit, so a record that was
    never modified can be told apart from one that was.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    updated_at = models.DateTimeField(null=True, blank=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )

    class Meta:
        abstract = True


ORIGIN_CHOICES = [
    ('HD', 'HD'),
    ('DS', 'DS'),
]


class MaternityAppointment(TrackedRecord):
    """An appointment booked with the maternity department."""
    STATUS_SCHEDULED = 'scheduled'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Programmé'),
        (STATUS_COMPLETED, 'Terminé'),
        (STATUS_CANCELLED, 'Annulé'),
    ]

    patient_name = models.CharField(max_length=255)
    patient_phone_number = models.CharField(max_length=32)
    patient_address = models.CharField(max_length=255, blank=True, null=True)
    appointment_reason = models.TextField(blank=True, null=True)
    appointment_date = models.DateTimeField(blank=True, null=True, db_index=True)
    status = models.CharField(
        max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, null=True, blank=True, db_index=True
    )

    class Meta:
        ordering = ['appointment_date']

    def __str__(self) -> str:
        return f"RDV #{self.pk} {self.patient_name}"


class MaternityDelivery(TrackedRecord):
    """One line of the delivery register."""
    file_number = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    full_name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, null=True)
    origin = models.CharField(max_length=2, choices=ORIGIN_CHOICES, blank=True, null=True)
    work_time = models.DateTimeField(blank=True, null=True)
    delivery_datetime = models.DateTimeField(blank=True, null=True, db_index=True)
    # Free-text markers: whichever column is filled gives the delivery type.
    delivery_eutocic = models.CharField(max_length=64, blank=True, null=True)
    delivery_dystocic = models.CharField(max_length=64, blank=True, null=True)
    delivery_transfert = models.CharField(max_length=64, blank=True, null=True)
    weight = models.FloatField(blank=True, null=True)
    newborn_living = models.PositiveIntegerField(blank=True, null=True)
    newborn_less_than_2_5kg = models.PositiveIntegerField(blank=True, null=True)
    number_of_deaths = models.PositiveIntegerField(blank=True, null=True)
    number_of_deaths_before_24h = models.PositiveIntegerField(blank=True, null=True)
    number_of_deaths_before_7_days = models.PositiveIntegerField(blank=True, null=True)
    is_mother_dead = models.BooleanField(default=False)
    transfer = models.CharField(max_length=255, blank=True, null=True)
    leaving_date = models.DateTimeField(blank=True, null=True)
    observations = models.TextField(blank=True, null=True)

    def __str__(self) -> str:
        return f"Accouchement #{self.pk} {self.full_name}"


class FamilyPlanningRecord(TrackedRecord):
    """A family planning consultation with contraceptive quantities."""
    NEW_METHODS = [
        'new_noristerat',
        'new_microlut',
        'new_microgynon',
        'new_emergency_pill',
        'new_male_condom',
        'new_female_condom',
        'new_iud',
        'new_implanon_explanon',
    ]
    RENEWAL_METHODS = [
        'renewal_noristerat',
        'renewal_microgynon',
        'renewal_lofemenal',
        'renewal_male_condom',
        'renewal_female_condom',
        'renewal_iud',
        'renewal_implants',
    ]

    file_number = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    full_name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, null=True)
    origin = models.CharField(max_length=2, choices=ORIGIN_CHOICES, blank=True, null=True)
    age = models.CharField(max_length=16, blank=True, null=True)
    is_new = models.BooleanField(default=True)

    new_noristerat = models.PositiveIntegerField(blank=True, null=True)
    new_microlut = models.PositiveIntegerField(blank=True, null=True)
    new_microgynon = models.PositiveIntegerField(blank=True, null=True)
    new_emergency_pill = models.PositiveIntegerField(blank=True, null=True)
    new_male_condom = models.PositiveIntegerField(blank=True, null=True)
    new_female_condom = models.PositiveIntegerField(blank=True, null=True)
    new_iud = models.PositiveIntegerField(blank=True, null=True)
    new_implanon_explanon = models.PositiveIntegerField(blank=True, null=True)

    renewal_noristerat = models.PositiveIntegerField(blank=True, null=True)
    renewal_microgynon = models.PositiveIntegerField(blank=True, null=True)
    renewal_lofemenal = models.PositiveIntegerField(blank=True, null=True)
    renewal_male_condom = models.PositiveIntegerField(blank=True, null=True)
    renewal_female_condom = models.PositiveIntegerField(blank=True, null=True)
    renewal_iud = models.PositiveIntegerField(blank=True, null=True)
    renewal_implants = models.PositiveIntegerField(blank=True, null=True)

    def __str__(self) -> str:
        return f"PF #{self.pk} {self.full_name}"


class PrenatalRecord(TrackedRecord):
    """A prenatal consultation (CPN) follow-up sheet."""
    ANEMIA_CHOICES = [
        ('none', 'Aucune'),
        ('mild', 'Légère'),
        ('moderate', 'Modérée'),
        ('severe', 'Sévère'),
    ]
    IRON_FOLIC_CHOICES = [
        ('none', 'Aucun'),
        ('prescribed', 'Prescrit'),
        ('administered', 'Administré'),
        ('completed', 'Complété'),
    ]

    file_number = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    full_name = models.CharField(max_length=255)
    patient_age = models.CharField(max_length=16, blank=True, null=True)
    pregnancy_age = models.CharField(max_length=32, blank=True, null=True)
    visit_cpn1 = models.DateField(blank=True, null=True)
    visit_cpn2 = models.DateField(blank=True, null=True)
    visit_cpn3 = models.DateField(blank=True, null=True)
    visit_cpn4 = models.DateField(blank=True, null=True)
    iron_folic_acid_dose1 = models.BooleanField(default=False)
    iron_folic_acid_dose2 = models.BooleanField(default=False)
    iron_folic_acid_dose3 = models.BooleanField(default=False)
    sulfadoxine_pyrimethamine_dose1 = models.BooleanField(default=False)
    sulfadoxine_pyrimethamine_dose2 = models.BooleanField(default=False)
    sulfadoxine_pyrimethamine_dose3 = models.BooleanField(default=False)
    anemia = models.CharField(max_length=16, choices=ANEMIA_CHOICES, blank=True, null=True)
    iron_folic_acid = models.CharField(max_length=16, choices=IRON_FOLIC_CHOICES, blank=True, null=True)
    observations = models.TextField(blank=True, null=True)

    def __str__(self) -> str:
        return f"CPN #{self.pk} {self.full_name}"


class MedicineHospitalization(TrackedRecord):
    """An admission to the medicine ward and how the patient left."""
    SEX_CHOICES = [
        ('M', 'Masculin'),
        ('F', 'Féminin'),
    ]
    # Leave flags in precedence order; the first one set names the outcome.
    LEAVE_FLAGS = [
        ('leave_authorized', 'authorized', 'Sortie autorisée'),
        ('leave_evaded', 'evaded', 'Sortie par évasion'),
        ('leave_transferred', 'transferred', 'Sortie par transfert'),
        ('leave_died_before_48h', 'died_before_48h', 'Décès avant 48h'),
        ('leave_died_after_48h', 'died_after_48h', 'Décès après 48h'),
    ]

    full_name = models.CharField(max_length=255)
    age = models.CharField(max_length=16, blank=True, null=True)
    sex = models.CharField(max_length=1, choices=SEX_CHOICES, blank=True, null=True)
    origin = models.CharField(max_length=2, choices=ORIGIN_CHOICES, blank=True, null=True)
    is_emergency = models.BooleanField(default=False)
    entry_diagnostic = models.TextField(blank=True, null=True)
    leaving_diagnostic = models.TextField(blank=True, null=True)
    is_pregnant = models.BooleanField(default=False)
    leave_authorized = models.BooleanField(default=False)
    leave_evaded = models.BooleanField(default=False)
    leave_transferred = models.BooleanField(default=False)
    leave_died_before_48h = models.BooleanField(default=False)
    leave_died_after_48h = models.BooleanField(default=False)
    leaving_date = models.DateTimeField(blank=True, null=True)

    def __str__(self) -> str:
        return f"Hospitalisation #{self.pk} {self.full_name}"


class Diagnostic(models.Model):
    """Reference list of diagnosis names offered when admitting a patient."""
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='records_aud_action_6f3c1e_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='records_aud_object__9b2d4a_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.object_type}#{self.object_id}"
