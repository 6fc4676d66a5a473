from django.urls import path
from .views import (
    DashboardProgressView,
    DashboardStatsView,
    StudyHistoryView,
    StudyResultView,
    StudySessionView,
    StudyStatsView,
    VocabularyDetailView,
    VocabularyListCreateView,
)

urlpatterns = [
    path("vocabulary", VocabularyListCreateView.as_view(), name="vocabulary-list"),
    path("vocabulary/<uuid:word_id>", VocabularyDetailView.as_view(), name="vocabulary-detail"),
    path("study/session", StudySessionView.as_view(), name="study-session"),
    path("study/result", StudyResultView.as_view(), name="study-result"),
    path("study/stats", StudyStatsView.as_view(), name="study-stats"),
    path("study/history", StudyHistoryView.as_view(), name="study-history"),
    path("dashboard/stats", DashboardStatsView.as_view(), name="dashboard-stats"),
    path("dashboard/progress", DashboardProgressView.as_view(), name="dashboard-progress"),
]
