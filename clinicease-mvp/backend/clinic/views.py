"""
HTTP 层。只做：取参数 → 调 service → 调 serializer。

认证由 settings.REST_FRAMEWORK 里的 BearerTokenAuthentication + IsAuthenticated 统一处理；
业务异常直接冒泡，unified_exception_handler 统一格式化。
"""

from django.http import HttpResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .exceptions import ValidationError
from .opd.printing import render_summary_text
from .serializers import (
    serialize_appointment,
    serialize_appointment_list,
    serialize_dashboard,
    serialize_doctor,
    serialize_patient,
    serialize_patient_detail,
    serialize_patient_list,
    serialize_prescription_draft,
    serialize_summary,
)
from .store import ClinicProfile, get_store


class OpdSessionView(APIView):
    """GET /api/opd/new/ - Issue a patient id for a fresh OPD form"""

    def get(self, request):
        return Response(services.new_opd_session())


class OpdSummaryView(APIView):
    """POST /api/opd/<source>/summary/ - Validate form and build OPD summary"""

    def post(self, request, source):
        summary = services.generate_summary(source, request.data, request.content_type)
        return Response(serialize_summary(summary))


class OpdSummaryDownloadView(APIView):
    """POST /api/opd/<source>/summary/download - Printable OPD summary as text file"""

    def post(self, request, source):
        summary = services.generate_summary(source, request.data, request.content_type)
        header = services.clinic_header(ClinicProfile(get_store()))
        content = render_summary_text(summary, header, timezone.localtime())

        filename = f"opd-summary-{summary.patient.name.replace(' ', '_') or 'patient'}.txt"
        response = HttpResponse(content, content_type='text/plain; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response


class PrescriptionDraftCreateView(APIView):
    """POST /api/prescriptions/ - Queue dictated prescription for AI structuring"""

    def post(self, request):
        draft = services.create_prescription_draft(request.data)
        return Response(serialize_prescription_draft(draft), status=202)


class PrescriptionDraftDetailView(APIView):
    """GET /api/prescriptions/<draft_id>/ - Poll AI prescription status"""

    def get(self, request, draft_id):
        draft = services.get_prescription_draft(draft_id)
        return Response(serialize_prescription_draft(draft))


class PatientListView(APIView):
    """GET/POST /api/patients/"""

    def get(self, request):
        patients = services.search_patients(request.query_params.get('q', '').strip())
        return Response(serialize_patient_list(patients))

    def post(self, request):
        patient = services.create_patient(request.data)
        return Response(serialize_patient(patient), status=201)


class PatientDetailView(APIView):
    """GET /api/patients/<patient_id>/"""

    def get(self, request, patient_id):
        return Response(serialize_patient_detail(services.get_patient(patient_id)))


class DoctorListView(APIView):
    """GET /api/doctors/"""

    def get(self, request):
        return Response({'doctors': [serialize_doctor(d) for d in services.list_doctors()]})


class AppointmentListView(APIView):
    """GET/POST /api/appointments/"""

    def get(self, request):
        raw_date = request.query_params.get('date')
        date = parse_date(raw_date) if raw_date else None
        if raw_date and date is None:
            raise ValidationError(
                message='Request validation failed.',
                detail={'errors': [{'field': 'date', 'message': 'Date must be YYYY-MM-DD.'}]},
            )
        appointments = services.list_appointments(date=date, doctor_id=request.query_params.get('doctor'))
        return Response(serialize_appointment_list(appointments))

    def post(self, request):
        appointment = services.create_appointment(request.data)
        return Response(serialize_appointment(appointment), status=201)


class AppointmentDetailView(APIView):
    """GET/PATCH /api/appointments/<appointment_id>/"""

    def get(self, request, appointment_id):
        return Response(serialize_appointment(services.get_appointment(appointment_id)))

    def patch(self, request, appointment_id):
        appointment = services.update_appointment(appointment_id, request.data)
        return Response(serialize_appointment(appointment))


class DashboardView(APIView):
    """GET /api/dashboard/"""

    def get(self, request):
        return Response(serialize_dashboard(services.dashboard_stats()))


class ClinicSettingsView(APIView):
    """GET/PUT /api/settings/ - Clinic name, print header, staff list"""

    def get(self, request):
        return Response(ClinicProfile(get_store()).as_dict())

    def put(self, request):
        profile = ClinicProfile(get_store())
        changed = profile.update(request.data)
        return Response({**profile.as_dict(), 'changed': changed})
