from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SubscriptionPlan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.CharField(help_text='Upper-case identifier, e.g. FREE, GOLD', max_length=50, unique=True)),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True, null=True)),
                ('free_credits', models.PositiveIntegerField(default=0)),
                ('wallet_limit', models.PositiveIntegerField(default=5)),
                ('redeem_credits', models.PositiveIntegerField(default=1)),
                ('redeem_cycle_days', models.PositiveIntegerField(default=15)),
                ('profile_limit', models.PositiveIntegerField(default=1)),
                ('price_monthly', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('price_yearly', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('yearly_discount_pct', models.PositiveIntegerField(default=0)),
                ('sort_order', models.IntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('is_default', models.BooleanField(default=False)),
                ('color', models.CharField(blank=True, max_length=32, null=True)),
                ('features', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['sort_order', 'id'],
                'indexes': [models.Index(fields=['is_active', 'sort_order'], name='plan_active_sort_idx')],
            },
        ),
    ]
