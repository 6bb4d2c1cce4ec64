from django.urls import path
from .views import (
    AppointmentDetailView,
    AppointmentListView,
    ClinicSettingsView,
    DashboardView,
    DoctorListView,
    OpdSessionView,
    OpdSummaryDownloadView,
    OpdSummaryView,
    PatientDetailView,
    PatientListView,
    PrescriptionDraftCreateView,
    PrescriptionDraftDetailView,
)

urlpatterns = [
    path('opd/new/', OpdSessionView.as_view(), name='opd-session'),
    path('opd/<str:source>/summary/', OpdSummaryView.as_view(), name='opd-summary'),
    path('opd/<str:source>/summary/download', OpdSummaryDownloadView.as_view(), name='opd-summary-download'),
    path('prescriptions/', PrescriptionDraftCreateView.as_view(), name='prescription-create'),
    path('prescriptions/<uuid:draft_id>/', PrescriptionDraftDetailView.as_view(), name='prescription-detail'),
    path('patients/', PatientListView.as_view(), name='patient-list'),
    path('patients/<str:patient_id>/', PatientDetailView.as_view(), name='patient-detail'),
    path('doctors/', DoctorListView.as_view(), name='doctor-list'),
    path('appointments/', AppointmentListView.as_view(), name='appointment-list'),
    path('appointments/<str:appointment_id>/', AppointmentDetailView.as_view(), name='appointment-detail'),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('settings/', ClinicSettingsView.as_view(), name='clinic-settings'),
]
