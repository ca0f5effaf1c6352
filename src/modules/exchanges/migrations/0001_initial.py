# Generated manually for the exchanges app

from django.db import migrations, models
import django.db.models.deletion
import uuid6


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Exchange',
            fields=[
                ('id', models.UUIDField(default=uuid6.uuid7, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('completed', 'Completed'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('product_from', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outgoing_exchanges', to='products.product')),
                ('product_to', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_exchanges', to='products.product')),
            ],
            options={
                'db_table': 'exchanges',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='exchanges_status_idx'),
                    models.Index(fields=['product_to', 'status'], name='exchanges_to_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('product_from', models.F('product_to')), _negated=True), name='exchanges_distinct_products'),
                    models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('product_from',), name='exchanges_one_pending_per_product_from'),
                ],
            },
        ),
    ]
