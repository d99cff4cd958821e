import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def _tracked_fields():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
        ('updated_at', models.DateTimeField(blank=True, null=True)),
        ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
        ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
    ]


ORIGIN_CHOICES = [('HD', 'HD'), ('DS', 'DS')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Department',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(max_length=50, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name='Diagnostic',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, unique=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('admin', 'Administrateur'), ('doctor', 'Docteur'), ('nurse', 'Infirmier'), ('midwife', 'Sage-femme'), ('pharmacist', 'Pharmacien'), ('lab_technician', 'Technicien de Laboratoire'), ('secretary', 'Secrétaire'), ('major', 'Major'), ('manager', 'Gestionnaire'), ('cashier', 'Caisse'), ('surgeon', 'Chirurgien'), ('accountant', 'Comptable'), ('anesthetist', 'Anesthésiste'), ('other', 'Autre')], db_index=True, default='other', max_length=20)),
                ('phone_number', models.CharField(blank=True, max_length=32)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='DepartmentMember',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('department', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='records.department')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='department_memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('department', 'user')},
            },
        ),
        migrations.AddField(
            model_name='user',
            name='departments',
            field=models.ManyToManyField(blank=True, related_name='users', through='records.DepartmentMember', to='records.department'),
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.IntegerField(blank=True, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='records_aud_action_6f3c1e_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='records_aud_object__9b2d4a_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MaternityAppointment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_tracked_fields(),
                ('patient_name', models.CharField(max_length=255)),
                ('patient_phone_number', models.CharField(max_length=32)),
                ('patient_address', models.CharField(blank=True, max_length=255, null=True)),
                ('appointment_reason', models.TextField(blank=True, null=True)),
                ('appointment_date', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('status', models.CharField(blank=True, choices=[('scheduled', 'Programmé'), ('completed', 'Terminé'), ('cancelled', 'Annulé')], db_index=True, default='scheduled', max_length=16, null=True)),
            ],
            options={
                'ordering': ['appointment_date'],
            },
        ),
        migrations.CreateModel(
            name='MaternityDelivery',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_tracked_fields(),
                ('file_number', models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ('full_name', models.CharField(max_length=255)),
                ('address', models.CharField(blank=True, max_length=255, null=True)),
                ('origin', models.CharField(blank=True, choices=ORIGIN_CHOICES, max_length=2, null=True)),
                ('work_time', models.DateTimeField(blank=True, null=True)),
                ('delivery_datetime', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('delivery_eutocic', models.CharField(blank=True, max_length=64, null=True)),
                ('delivery_dystocic', models.CharField(blank=True, max_length=64, null=True)),
                ('delivery_transfert', models.CharField(blank=True, max_length=64, null=True)),
                ('weight', models.FloatField(blank=True, null=True)),
                ('newborn_living', models.PositiveIntegerField(blank=True, null=True)),
                ('newborn_less_than_2_5kg', models.PositiveIntegerField(blank=True, null=True)),
                ('number_of_deaths', models.PositiveIntegerField(blank=True, null=True)),
                ('number_of_deaths_before_24h', models.PositiveIntegerField(blank=True, null=True)),
                ('number_of_deaths_before_7_days', models.PositiveIntegerField(blank=True, null=True)),
                ('is_mother_dead', models.BooleanField(default=False)),
                ('transfer', models.CharField(blank=True, max_length=255, null=True)),
                ('leaving_date', models.DateTimeField(blank=True, null=True)),
                ('observations', models.TextField(blank=True, null=True)),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='FamilyPlanningRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_tracked_fields(),
                ('file_number', models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ('full_name', models.CharField(max_length=255)),
                ('address', models.CharField(blank=True, max_length=255, null=True)),
                ('origin', models.CharField(blank=True, choices=ORIGIN_CHOICES, max_length=2, null=True)),
                ('age', models.CharField(blank=True, max_length=16, null=True)),
                ('is_new', models.BooleanField(default=True)),
                ('new_noristerat', models.PositiveIntegerField(blank=True, null=True)),
                ('new_microlut', models.PositiveIntegerField(blank=True, null=True)),
                ('new_microgynon', models.PositiveIntegerField(blank=True, null=True)),
                ('new_emergency_pill', models.PositiveIntegerField(blank=True, null=True)),
                ('new_male_condom', models.PositiveIntegerField(blank=True, null=True)),
                ('new_female_condom', models.PositiveIntegerField(blank=True, null=True)),
                ('new_iud', models.PositiveIntegerField(blank=True, null=True)),
                ('new_implanon_explanon', models.PositiveIntegerField(blank=True, null=True)),
                ('renewal_noristerat', models.PositiveIntegerField(blank=True, null=True)),
                ('renewal_microgynon', models.PositiveIntegerField(blank=True, null=True)),
                ('renewal_lofemenal', models.PositiveIntegerField(blank=True, null=True)),
                ('renewal_male_condom', models.PositiveIntegerField(blank=True, null=True)),
                ('renewal_female_condom', models.PositiveIntegerField(blank=True, null=True)),
                ('renewal_iud', models.PositiveIntegerField(blank=True, null=True)),
                ('renewal_implants', models.PositiveIntegerField(blank=True, null=True)),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PrenatalRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_tracked_fields(),
                ('file_number', models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ('full_name', models.CharField(max_length=255)),
                ('patient_age', models.CharField(blank=True, max_length=16, null=True)),
                ('pregnancy_age', models.CharField(blank=True, max_length=32, null=True)),
                ('visit_cpn1', models.DateField(blank=True, null=True)),
                ('visit_cpn2', models.DateField(blank=True, null=True)),
                ('visit_cpn3', models.DateField(blank=True, null=True)),
                ('visit_cpn4', models.DateField(blank=True, null=True)),
                ('iron_folic_acid_dose1', models.BooleanField(default=False)),
                ('iron_folic_acid_dose2', models.BooleanField(default=False)),
                ('iron_folic_acid_dose3', models.BooleanField(default=False)),
                ('sulfadoxine_pyrimethamine_dose1', models.BooleanField(default=False)),
                ('sulfadoxine_pyrimethamine_dose2', models.BooleanField(default=False)),
                ('sulfadoxine_pyrimethamine_dose3', models.BooleanField(default=False)),
                ('anemia', models.CharField(blank=True, choices=[('none', 'Aucune'), ('mild', 'Légère'), ('moderate', 'Modérée'), ('severe', 'Sévère')], max_length=16, null=True)),
                ('iron_folic_acid', models.CharField(blank=True, choices=[('none', 'Aucun'), ('prescribed', 'Prescrit'), ('administered', 'Administré'), ('completed', 'Complété')], max_length=16, null=True)),
                ('observations', models.TextField(blank=True, null=True)),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='MedicineHospitalization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_tracked_fields(),
                ('full_name', models.CharField(max_length=255)),
                ('age', models.CharField(blank=True, max_length=16, null=True)),
                ('sex', models.CharField(blank=True, choices=[('M', 'Masculin'), ('F', 'Féminin')], max_length=1, null=True)),
                ('origin', models.CharField(blank=True, choices=ORIGIN_CHOICES, max_length=2, null=True)),
                ('is_emergency', models.BooleanField(default=False)),
                ('entry_diagnostic', models.TextField(blank=True, null=True)),
                ('leaving_diagnostic', models.TextField(blank=True, null=True)),
                ('is_pregnant', models.BooleanField(default=False)),
                ('leave_authorized', models.BooleanField(default=False)),
                ('leave_evaded', models.BooleanField(default=False)),
                ('leave_transferred', models.BooleanField(default=False)),
                ('leave_died_before_48h', models.BooleanField(default=False)),
                ('leave_died_after_48h', models.BooleanField(default=False)),
                ('leaving_date', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'abstract': False,
            },
        ),
    ]
