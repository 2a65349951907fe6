import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FundingWallet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('balance', models.PositiveIntegerField(default=0)),
                ('total_purchased', models.PositiveIntegerField(default=0)),
                ('total_spent', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='funding_wallet', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [models.CheckConstraint(condition=models.Q(('balance__gte', 0)), name='funding_balance_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='RedeemWallet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('balance', models.PositiveIntegerField(default=0)),
                ('limit', models.PositiveIntegerField(default=50)),
                ('redeem_credits', models.PositiveIntegerField(default=1)),
                ('redeem_cycle_days', models.PositiveIntegerField(default=15)),
                ('last_redeemed', models.DateTimeField(blank=True, null=True)),
                ('next_redemption', models.DateTimeField(blank=True, null=True)),
                ('last_reset_at', models.DateTimeField(blank=True, null=True)),
                ('total_earned', models.PositiveIntegerField(default=0)),
                ('total_spent', models.PositiveIntegerField(default=0)),
                ('credits_wasted', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='redeem_wallet', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [models.CheckConstraint(condition=models.Q(('balance__gte', 0)), name='redeem_balance_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('CREDIT', 'Credit'), ('DEBIT', 'Debit'), ('TOP_UP', 'Top Up'), ('PURCHASE', 'Purchase'), ('REDEMPTION', 'Redemption'), ('REFUND', 'Refund'), ('BONUS', 'Bonus')], max_length=16)),
                ('wallet_type', models.CharField(choices=[('FUNDING', 'Funding'), ('REDEEM', 'Redeem')], max_length=8)),
                ('amount', models.PositiveIntegerField()),
                ('description', models.CharField(blank=True, default='', max_length=500)),
                ('payment_method', models.CharField(blank=True, max_length=32, null=True)),
                ('reference_type', models.CharField(blank=True, max_length=64, null=True)),
                ('reference_id', models.CharField(blank=True, max_length=64, null=True)),
                ('idempotency_key', models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recorded_transactions', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'created_at'], name='txn_user_created_idx'),
                    models.Index(fields=['type'], name='txn_type_idx'),
                    models.Index(fields=['wallet_type'], name='txn_wallet_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='WalletAdjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('wallet_type', models.CharField(choices=[('FUNDING', 'Funding'), ('REDEEM', 'Redeem')], max_length=8)),
                ('previous_balance', models.PositiveIntegerField()),
                ('new_balance', models.PositiveIntegerField()),
                ('previous_limit', models.PositiveIntegerField(blank=True, null=True)),
                ('new_limit', models.PositiveIntegerField(blank=True, null=True)),
                ('reason', models.CharField(blank=True, default='', max_length=255)),
                ('idempotency_key', models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='performed_adjustments', to=settings.AUTH_USER_MODEL)),
                ('transaction', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='walletDesk.transaction')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='wallet_adjustments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
    ]
