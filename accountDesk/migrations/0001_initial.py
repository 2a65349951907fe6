import accountDesk.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
        ('subscriptionDesk', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CustomUser',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('name', models.CharField(blank=True, default='', max_length=255)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('role', models.CharField(choices=[('USER', 'Member'), ('SUPPORT_AGENT', 'Support Agent'), ('CONTENT_EDITOR', 'Content Editor'), ('CONSULTANT', 'Consultant'), ('SUPERVISOR', 'Supervisor'), ('SUPER_ADMIN', 'Super Admin')], default='USER', max_length=20)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive'), ('SUSPENDED', 'Suspended'), ('BANNED', 'Banned')], default='ACTIVE', max_length=20)),
                ('subscription', models.CharField(default='FREE', max_length=50)),
                ('tier_free_credits', models.PositiveIntegerField(default=3)),
                ('tier_wallet_limit', models.PositiveIntegerField(default=5)),
                ('tier_redeem_credits', models.PositiveIntegerField(default=1)),
                ('tier_redeem_cycle_days', models.PositiveIntegerField(default=15)),
                ('tier_profile_limit', models.PositiveIntegerField(default=1)),
                ('tier_price_monthly', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('tier_price_yearly', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False)),
                ('last_login_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('subscription_plan', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='subscriptionDesk.subscriptionplan')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['role'], name='user_role_idx'),
                    models.Index(fields=['subscription'], name='user_subscription_idx'),
                    models.Index(fields=['status'], name='user_status_idx'),
                ],
            },
            managers=[
                ('objects', accountDesk.models.CustomUserManager()),
            ],
        ),
    ]
