import uuid
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('branches', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Operation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('uid', models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ('kind', models.CharField(choices=[('worker', 'Worker operation'), ('admin', 'Admin operation')], default='worker', max_length=10)),
                ('name', models.CharField(max_length=150)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('original_price', models.DecimalField(blank=True, decimal_places=2, help_text="Full service price when ``price`` is the worker's share", max_digits=10, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('pending_to_confirm', 'Pending to confirm'), ('finished', 'Finished')], default='pending', max_length=20)),
                ('by', models.CharField(blank=True, choices=[('cash', 'Cash'), ('telebirr', 'Telebirr')], max_length=10, null=True)),
                ('payment_image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('workers', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('finished_date', models.DateTimeField(blank=True, null=True)),
                ('worker_confirmed_date', models.DateTimeField(blank=True, null=True)),
                ('payment_confirmed_date', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='operations', to='branches.branch')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='operations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Operation',
                'verbose_name_plural': 'Operations',
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['user', 'kind', 'status'], name='operations__user_id_6c1e2f_idx'),
                    models.Index(fields=['branch', 'status'], name='operations__branch__a3d9b4_idx'),
                ],
            },
        ),
    ]
