import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Word",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.CharField(db_index=True, max_length=64)),
                ("english_word", models.CharField(max_length=255)),
                ("example_sentence", models.TextField(blank=True, default="", max_length=1000)),
                ("difficulty_level", models.PositiveSmallIntegerField(
                    default=1,
                    validators=[
                        django.core.validators.MinValueValidator(1),
                        django.core.validators.MaxValueValidator(5),
                    ],
                )),
                ("mastery_level", models.PositiveSmallIntegerField(
                    choices=[(0, "unlearned"), (1, "learning"), (2, "mastered")], default=0
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "vocabulary",
                "indexes": [
                    models.Index(fields=["user_id", "mastery_level"], name="idx_vocab_user_mastery"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JapaneseMeaning",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("meaning", models.CharField(max_length=500)),
                ("part_of_speech", models.CharField(blank=True, default="", max_length=50)),
                ("usage_note", models.CharField(blank=True, default="", max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("word", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="meanings", to="study.word"
                )),
            ],
            options={
                "db_table": "japanese_meanings",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="StudyEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(db_index=True, max_length=64)),
                ("is_correct", models.BooleanField()),
                ("response_time_ms", models.PositiveIntegerField(
                    blank=True, null=True, validators=[django.core.validators.MaxValueValidator(300000)]
                )),
                ("studied_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("word", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="study_events", to="study.word"
                )),
            ],
            options={
                "db_table": "study_sessions",
                "indexes": [
                    models.Index(fields=["user_id", "word", "-studied_at"], name="idx_event_user_word_time"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DailyCounter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(max_length=64)),
                ("study_date", models.DateField()),
                ("words_studied", models.PositiveIntegerField(default=0)),
                ("correct_answers", models.PositiveIntegerField(default=0)),
                ("total_study_time_seconds", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "daily_stats",
                "constraints": [
                    models.UniqueConstraint(fields=("user_id", "study_date"), name="uq_daily_user_date"),
                    models.CheckConstraint(
                        condition=models.Q(("correct_answers__lte", models.F("words_studied"))),
                        name="ck_daily_correct_lte_studied",
                    ),
                ],
            },
        ),
    ]
