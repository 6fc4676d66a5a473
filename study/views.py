# study/views.py
from __future__ import annotations

from django.db.models import Q
from django.db.models.functions import Lower
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .dashboard import DashboardAggregator
from .datastore import get_datastore
from .exceptions import NotFoundError
from .models import JapaneseMeaning, Word
from .serializers import (
    DailyProgressSerializer,
    DashboardStatsSerializer,
    HistoryQuerySerializer,
    SessionQuerySerializer,
    StatsQuerySerializer,
    StudyEventSerializer,
    StudyResultSerializer,
    StudyStatsSerializer,
    VocabularySearchSerializer,
    VocabularySerializer,
    VocabularyWriteSerializer,
)
from .services import StudyHistoryReader, StudyResultRecorder


def _validated_query(serializer_cls, request):
    s = serializer_cls(data=request.query_params)
    s.is_valid(raise_exception=True)
    return s.validated_data


# --- vocabulary ---

class VocabularyListCreateView(APIView):
    """
    GET  /api/vocabulary
      ?query=&mastery_level=&difficulty_level=
      &sort_by=created_at|english_word|mastery_level|difficulty_level
      &sort_order=asc|desc&limit=&offset=
    POST /api/vocabulary
    """
    def get(self, request):
        params = _validated_query(VocabularySearchSerializer, request)

        qs = Word.objects.filter(user_id=request.user.id)
        if params.get("mastery_level") is not None:
            qs = qs.filter(mastery_level=params["mastery_level"])
        if params.get("difficulty_level") is not None:
            qs = qs.filter(difficulty_level=params["difficulty_level"])
        query = (params.get("query") or "").strip()
        if query:
            by_meaning = JapaneseMeaning.objects.filter(meaning__icontains=query).values("word_id")
            qs = qs.filter(Q(english_word__icontains=query) | Q(pk__in=by_meaning))

        sort_by = params["sort_by"]
        if sort_by == "english_word":
            key = Lower("english_word")
            ordering = key.desc() if params["sort_order"] == "desc" else key.asc()
        else:
            ordering = f"-{sort_by}" if params["sort_order"] == "desc" else sort_by
        qs = qs.order_by(ordering, "id").prefetch_related("meanings")

        total = qs.count()
        offset, limit = params["offset"], params["limit"]
        page = qs[offset:offset + limit]

        return Response({
            "data": VocabularySerializer(page, many=True).data,
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "has_more": offset + limit < total,
            },
        }, status=status.HTTP_200_OK)

    def post(self, request):
        s = VocabularyWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        word = s.save(user_id=request.user.id)
        return Response(VocabularySerializer(word).data, status=status.HTTP_201_CREATED)


class VocabularyDetailView(APIView):
    """GET / PUT / PATCH / DELETE /api/vocabulary/{id} (owner only, otherwise 404)."""

    def _get_owned(self, request, word_id) -> Word:
        word = Word.objects.filter(pk=word_id, user_id=request.user.id).prefetch_related("meanings").first()
        if word is None:
            raise NotFoundError("Vocabulary not found or access denied")
        return word

    def get(self, request, word_id):
        return Response(VocabularySerializer(self._get_owned(request, word_id)).data)

    def put(self, request, word_id):
        word = self._get_owned(request, word_id)
        s = VocabularyWriteSerializer(word, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        word = s.save()
        return Response(VocabularySerializer(self._get_owned(request, word.pk)).data)

    def patch(self, request, word_id):
        return self.put(request, word_id)

    def delete(self, request, word_id):
        self._get_owned(request, word_id).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# --- study ---

class StudySessionView(APIView):
    """GET /api/study/session?limit=1..50 -> words to study, lowest mastery first."""
    def get(self, request):
        params = _validated_query(SessionQuerySerializer, request)
        session = StudyHistoryReader(get_datastore()).start_session(request.user.id, params["limit"])
        return Response({
            "vocabulary": VocabularySerializer(session["vocabulary"], many=True).data,
            "session_id": session["session_id"],
            "total_words": session["total_words"],
        })


class StudyResultView(APIView):
    """POST /api/study/result -> 201 with the recorded study event."""
    def post(self, request):
        s = StudyResultSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        event = StudyResultRecorder(get_datastore()).record(request.user.id, s.to_request())
        return Response(StudyEventSerializer(event).data, status=status.HTTP_201_CREATED)


class StudyStatsView(APIView):
    """GET /api/study/stats?vocabulary_id= (optional)."""
    def get(self, request):
        params = _validated_query(StatsQuerySerializer, request)
        stats = StudyHistoryReader(get_datastore()).get_study_stats(
            request.user.id, params.get("vocabulary_id")
        )
        return Response(StudyStatsSerializer(stats).data)


class StudyHistoryView(APIView):
    """GET /api/study/history?limit=1..200 -> newest-first study events."""
    def get(self, request):
        params = _validated_query(HistoryQuerySerializer, request)
        events = StudyHistoryReader(get_datastore()).get_recent_events(request.user.id, params["limit"])
        return Response(StudyEventSerializer(events, many=True).data)


# --- dashboard ---

class DashboardStatsView(APIView):
    """GET /api/dashboard/stats"""
    def get(self, request):
        stats = DashboardAggregator(get_datastore()).get_dashboard_stats(request.user.id)
        return Response(DashboardStatsSerializer(stats).data)


class DashboardProgressView(APIView):
    """GET /api/dashboard/progress -> last 7 days, oldest first."""
    def get(self, request):
        progress = DashboardAggregator(get_datastore()).get_weekly_progress(request.user.id)
        return Response(DailyProgressSerializer(progress, many=True).data)
