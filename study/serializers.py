# study/serializers.py
import datetime as dt

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from .models import MAX_RESPONSE_TIME_MS, JapaneseMeaning, MasteryLevel, StudyEvent, Word
from .services import StudyResultRequest


class AwareDateTimeField(serializers.DateTimeField):
    """
    Datetime field that ensures tz-aware UTC datetimes.
    - Accepts ISO strings with/without timezone; if naive → assume UTC.
    - Always outputs ISO in UTC.
    """
    def to_internal_value(self, value):
        d = super().to_internal_value(value)
        if d is None:
            return None
        if timezone.is_naive(d):
            d = timezone.make_aware(d, dt.timezone.utc)
        return d.astimezone(dt.timezone.utc)

    def to_representation(self, value):
        if value is None:
            return None
        if timezone.is_naive(value):
            value = timezone.make_aware(value, dt.timezone.utc)
        return super().to_representation(value.astimezone(dt.timezone.utc))


class StrictBooleanField(serializers.BooleanField):
    """Only JSON true/false; "true", 1 and friends are rejected."""
    default_error_messages = {"invalid": "is_correct must be a boolean value."}

    def to_internal_value(self, data):
        if not isinstance(data, bool):
            self.fail("invalid")
        return data


# --- study ---

class StudyResultSerializer(serializers.Serializer):
    """
    Body of POST /api/study/result.
      - vocabulary_id: word UUID (ownership is checked by the recorder).
      - is_correct: JSON boolean.
      - response_time: optional answer latency in ms, 0..300000.
    """
    vocabulary_id = serializers.UUIDField()
    is_correct = StrictBooleanField()
    response_time = serializers.IntegerField(
        required=False, allow_null=True, min_value=0, max_value=MAX_RESPONSE_TIME_MS
    )

    def to_request(self) -> StudyResultRequest:
        data = self.validated_data
        return StudyResultRequest(
            word_id=data["vocabulary_id"],
            is_correct=data["is_correct"],
            response_time_ms=data.get("response_time"),
        )


class StudyEventSerializer(serializers.ModelSerializer):
    vocabulary_id = serializers.UUIDField(source="word_id", read_only=True)
    response_time = serializers.IntegerField(source="response_time_ms", read_only=True, allow_null=True)
    studied_at = AwareDateTimeField(read_only=True)

    class Meta:
        model = StudyEvent
        fields = ("id", "user_id", "vocabulary_id", "is_correct", "response_time", "studied_at")


class SessionQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, default=10, min_value=1, max_value=50)


class HistoryQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, default=50, min_value=1, max_value=200)


class StatsQuerySerializer(serializers.Serializer):
    vocabulary_id = serializers.UUIDField(required=False)


class StudyStatsSerializer(serializers.Serializer):
    totalSessions = serializers.IntegerField(source="total_sessions")
    correctAnswers = serializers.IntegerField(source="correct_answers")
    averageResponseTime = serializers.FloatField(source="average_response_time")
    accuracy = serializers.FloatField()


# --- vocabulary ---

class JapaneseMeaningSerializer(serializers.ModelSerializer):
    class Meta:
        model = JapaneseMeaning
        fields = ("id", "meaning", "part_of_speech", "usage_note", "created_at")
        read_only_fields = ("id", "created_at")


class VocabularySerializer(serializers.ModelSerializer):
    """Read shape of a word together with its meanings."""
    japanese_meanings = JapaneseMeaningSerializer(source="meanings", many=True, read_only=True)
    created_at = AwareDateTimeField(read_only=True)
    updated_at = AwareDateTimeField(read_only=True)

    class Meta:
        model = Word
        fields = (
            "id",
            "user_id",
            "english_word",
            "example_sentence",
            "difficulty_level",
            "mastery_level",
            "created_at",
            "updated_at",
            "japanese_meanings",
        )
        read_only_fields = fields


class VocabularyWriteSerializer(serializers.ModelSerializer):
    """
    Create/update a word.
    Notes:
      - japanese_meanings needs at least one entry; on update it replaces all meanings.
      - mastery_level can only be set on update (new words start unlearned).
    """
    japanese_meanings = JapaneseMeaningSerializer(many=True, allow_empty=False)
    mastery_level = serializers.ChoiceField(choices=MasteryLevel.choices, required=False)

    class Meta:
        model = Word
        fields = (
            "english_word",
            "example_sentence",
            "difficulty_level",
            "mastery_level",
            "japanese_meanings",
        )

    def validate(self, attrs):
        if self.instance is None:
            attrs.pop("mastery_level", None)
        return attrs

    def create(self, validated_data):
        meanings = validated_data.pop("japanese_meanings")
        with transaction.atomic():
            word = Word.objects.create(**validated_data)
            JapaneseMeaning.objects.bulk_create(
                [JapaneseMeaning(word=word, **m) for m in meanings]
            )
        return word

    def update(self, instance, validated_data):
        meanings = validated_data.pop("japanese_meanings", None)
        with transaction.atomic():
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()
            if meanings is not None:
                instance.meanings.all().delete()
                JapaneseMeaning.objects.bulk_create(
                    [JapaneseMeaning(word=instance, **m) for m in meanings]
                )
        return instance


class VocabularySearchSerializer(serializers.Serializer):
    SORT_FIELDS = ("created_at", "english_word", "mastery_level", "difficulty_level")

    query = serializers.CharField(required=False, allow_blank=True, max_length=255)
    mastery_level = serializers.IntegerField(required=False, min_value=0, max_value=2)
    difficulty_level = serializers.IntegerField(required=False, min_value=1, max_value=5)
    limit = serializers.IntegerField(required=False, default=50, min_value=1, max_value=100)
    offset = serializers.IntegerField(required=False, default=0, min_value=0)
    sort_by = serializers.ChoiceField(choices=SORT_FIELDS, required=False, default="created_at")
    sort_order = serializers.ChoiceField(choices=("asc", "desc"), required=False, default="desc")


# --- dashboard ---

class DailyProgressSerializer(serializers.Serializer):
    date = serializers.DateField()
    wordsStudied = serializers.IntegerField(source="words_studied")
    correctAnswers = serializers.IntegerField(source="correct_answers")
    accuracy = serializers.FloatField()


class TotalStatsSerializer(serializers.Serializer):
    totalWordsStudied = serializers.IntegerField(source="total_words_studied")
    totalCorrectAnswers = serializers.IntegerField(source="total_correct_answers")
    totalStudyTime = serializers.IntegerField(source="total_study_time")
    studyDays = serializers.IntegerField(source="study_days")
    averageAccuracy = serializers.FloatField(source="average_accuracy")


class DashboardStatsSerializer(serializers.Serializer):
    totalVocabulary = serializers.IntegerField(source="total_vocabulary")
    masteredVocabulary = serializers.IntegerField(source="mastered_vocabulary")
    todayStudied = serializers.IntegerField(source="today_studied")
    currentStreak = serializers.IntegerField(source="current_streak")
    weeklyProgress = DailyProgressSerializer(source="weekly_progress", many=True)
    totalStats = TotalStatsSerializer(source="total_stats")
