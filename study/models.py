import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

MAX_RESPONSE_TIME_MS = 300_000


class MasteryLevel(models.IntegerChoices):
    UNLEARNED = 0, "unlearned"
    LEARNING = 1, "learning"
    MASTERED = 2, "mastered"


class Word(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, db_index=True)                # Owner (auth provider user id)
    english_word = models.CharField(max_length=255)
    example_sentence = models.TextField(max_length=1000, blank=True, default="")
    difficulty_level = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    mastery_level = models.PositiveSmallIntegerField(
        choices=MasteryLevel.choices, default=MasteryLevel.UNLEARNED
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "vocabulary"
        indexes = [
            models.Index(fields=["user_id", "mastery_level"], name="idx_vocab_user_mastery"),
        ]

    def __str__(self):
        return self.english_word


class JapaneseMeaning(models.Model):
    word = models.ForeignKey(Word, on_delete=models.CASCADE, related_name="meanings")
    meaning = models.CharField(max_length=500)
    part_of_speech = models.CharField(max_length=50, blank=True, default="")
    usage_note = models.CharField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "japanese_meanings"
        ordering = ["id"]


class StudyEvent(models.Model):
    user_id = models.CharField(max_length=64, db_index=True)
    word = models.ForeignKey(Word, on_delete=models.CASCADE, related_name="study_events")
    is_correct = models.BooleanField()
    response_time_ms = models.PositiveIntegerField(                         # Answer latency (optional)
        null=True, blank=True, validators=[MaxValueValidator(MAX_RESPONSE_TIME_MS)]
    )
    studied_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "study_sessions"
        indexes = [
            models.Index(fields=["user_id", "word", "-studied_at"], name="idx_event_user_word_time"),
        ]


class DailyCounter(models.Model):
    user_id = models.CharField(max_length=64)
    study_date = models.DateField()                                         # Calendar day in STUDY_TIMEZONE
    words_studied = models.PositiveIntegerField(default=0)
    correct_answers = models.PositiveIntegerField(default=0)
    total_study_time_seconds = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "daily_stats"
        constraints = [
            models.UniqueConstraint(fields=["user_id", "study_date"],
                                    name="uq_daily_user_date"),
            models.CheckConstraint(condition=models.Q(correct_answers__lte=models.F("words_studied")),
                                   name="ck_daily_correct_lte_studied"),
        ]
