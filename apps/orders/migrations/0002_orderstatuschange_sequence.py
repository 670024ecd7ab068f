from django.db import migrations, models, transaction


def number_status_changes(apps, schema_editor):
    OrderStatusChange = apps.get_model("orders", "OrderStatusChange")

    with transaction.atomic():
        last_order, seq = None, 0
        for change in OrderStatusChange.objects.order_by("order_id", "created_at", "id").iterator():
            seq = seq + 1 if change.order_id == last_order else 0
            last_order = change.order_id
            OrderStatusChange.objects.filter(pk=change.pk).update(sequence=seq)


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="orderstatuschange",
            name="sequence",
            field=models.PositiveIntegerField(default=0),
        ),
        migrations.RunPython(number_status_changes, migrations.RunPython.noop),
        migrations.AlterModelOptions(
            name="orderstatuschange",
            options={"ordering": ["sequence"]},
        ),
        migrations.AddConstraint(
            model_name="orderstatuschange",
            constraint=models.UniqueConstraint(fields=("order", "sequence"), name="orders_status_change_seq_uniq"),
        ),
    ]
