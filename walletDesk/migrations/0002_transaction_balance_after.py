from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('walletDesk', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='transaction',
            name='balance_after',
            field=models.PositiveIntegerField(blank=True, null=True),
        ),
    ]
