from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="TimeLog",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("user_id", models.CharField(db_index=True, max_length=255)),
                ("domain", models.CharField(max_length=255)),
                ("date", models.DateField()),
                ("duration_ms", models.BigIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-date", "domain"],
            },
        ),
        migrations.CreateModel(
            name="SiteClassification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("user_id", models.CharField(db_index=True, max_length=255)),
                ("domain", models.CharField(max_length=255)),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("productive", "Productive"),
                            ("unproductive", "Unproductive"),
                        ],
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["kind", "domain"],
            },
        ),
        migrations.AddConstraint(
            model_name="timelog",
            constraint=models.UniqueConstraint(
                fields=("user_id", "domain", "date"),
                name="uniq_timelog_user_domain_date",
            ),
        ),
        migrations.AddConstraint(
            model_name="siteclassification",
            constraint=models.UniqueConstraint(
                fields=("user_id", "domain"),
                name="uniq_classification_user_domain",
            ),
        ),
    ]
