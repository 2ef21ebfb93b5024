from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("projects", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="project",
            name="status",
            field=models.CharField(
                choices=[
                    ("draft", "Draft"),
                    ("pending-publish", "Pending Publication"),
                    ("published", "Published"),
                    ("in-progress", "In Progress"),
                    ("completed", "Completed"),
                ],
                default="draft",
                max_length=32,
            ),
        ),
    ]
