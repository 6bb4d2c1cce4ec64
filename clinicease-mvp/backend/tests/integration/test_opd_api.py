"""
Integration tests: 真实 HTTP 请求打到 DRF View，验证 OPD 汇总完整流程。

  HTTP Request → urls.py → View → intake adapter → builder → serializer → Response

每个测试验证：status_code + response body 的统一格式。
"""
import json
from unittest.mock import patch


def post_summary(api_client, source, payload, suffix=''):
    """快捷方式：POST /api/opd/<source>/summary/，返回 (status_code, body_dict)。"""
    response = api_client.post(
        f'/api/opd/{source}/summary/{suffix}',
        data=json.dumps(payload),
        content_type='application/json',
    )
    return response.status_code, json.loads(response.content)


# ===================================================================
# Auth gate
# ===================================================================

class TestAuthGate:

    def test_missing_token_returns_401(self, anonymous_client, sample_dental_payload):
        response = anonymous_client.post(
            '/api/opd/dental/summary/', data=json.dumps(sample_dental_payload), content_type='application/json',
        )
        assert response.status_code == 401

    def test_wrong_token_returns_401(self, anonymous_client):
        response = anonymous_client.get('/api/opd/new/', HTTP_AUTHORIZATION='Bearer nope')
        assert response.status_code == 401


# ===================================================================
# Session
# ===================================================================

class TestOpdSession:

    def test_new_session(self, api_client):
        response = api_client.get('/api/opd/new/')
        body = json.loads(response.content)

        assert response.status_code == 200
        assert body['patient_id'].startswith('CZ-')
        assert body['tooth_chart'][0]['teeth'][0] == {'tooth': 'UR8', 'note': ''}


# ===================================================================
# Summary happy path
# ===================================================================

class TestDentalSummary:

    def test_summary(self, api_client, sample_dental_payload):
        status, body = post_summary(api_client, 'dental', sample_dental_payload)

        assert status == 200
        assert 'type' not in body
        summary = body['opd_summary']
        assert summary['patient'] == {
            'id': 'CZ-123456', 'name': 'John Doe', 'age': '34', 'gender': 'Male', 'contact': '9876543210',
        }
        assert summary['vitals'] == {'bp': '120/80', 'pulse': '72'}
        assert summary['medical_history'] == 'Hypertension and diabetes'
        assert summary['diagnosis_label'] == 'Provisional Diagnosis'
        assert summary['diagnosis'] == 'Irreversible pulpitis'
        assert summary['tooth_notes'] == '#UR8: missing, #LL3: mobile'
        assert summary['radiographs'] == 'IOPA (w.r.t #33), OPG'
        assert summary['tests_advised'] == 'CBC'
        assert summary['prescription_table'].split('\n')[2] == (
            '| PARACETAMOL | 500 mg | 2 time(s) daily | 5 Days | After food |'
        )
        assert 'follow_up_date' not in summary

    def test_no_medicines_means_no_table(self, api_client, sample_dental_payload):
        sample_dental_payload['medicines'] = [{'name': '', 'dosageValue': '500'}]
        status, body = post_summary(api_client, 'dental', sample_dental_payload)

        assert status == 200
        assert 'prescription_table' not in body['opd_summary']


class TestGeneralSummary:

    def test_summary(self, api_client, sample_general_payload):
        status, body = post_summary(api_client, 'general', sample_general_payload)

        summary = body['opd_summary']
        assert status == 200
        assert summary['diagnosis_label'] == 'Final Diagnosis'
        assert summary['vitals'] == {'height': '160', 'weight': '55'}
        assert summary['tests_advised'] == 'CBC'
        assert summary['treatments_advised'] == 'Steam inhalation'
        assert summary['follow_up_date'] == 'After 1 week'
        assert 'tooth_notes' not in summary


# ===================================================================
# Errors
# ===================================================================

class TestSummaryErrors:

    def test_missing_required_fields(self, api_client):
        status, body = post_summary(api_client, 'dental', {'patientName': 'x'})

        assert status == 400
        assert body['type'] == 'validation_error'
        assert body['code'] == 'VALIDATION_ERROR'
        fields = [e['field'] for e in body['detail']['errors']]
        assert fields == ['patientAge', 'provisionalDiagnosis']

    def test_medicine_without_dosage(self, api_client, sample_dental_payload):
        sample_dental_payload['medicines'] = [{'name': 'paracetamol'}]
        status, body = post_summary(api_client, 'dental', sample_dental_payload)

        assert status == 400
        assert body['detail']['errors'][0]['field'] == 'medicines[0].dosageValue'

    def test_unknown_source(self, api_client, sample_dental_payload):
        status, body = post_summary(api_client, 'radiology', sample_dental_payload)

        assert status == 400
        assert body['code'] == 'UNKNOWN_SOURCE'

    def test_malformed_json(self, api_client):
        response = api_client.post('/api/opd/dental/summary/', data='{oops', content_type='application/json')

        assert response.status_code == 400
        assert json.loads(response.content)['code'] == 'INVALID_JSON'

    def test_build_failure_is_generic(self, api_client, sample_dental_payload):
        with patch('clinic.opd.builder.format_radiograph', side_effect=AttributeError('boom')):
            status, body = post_summary(api_client, 'dental', sample_dental_payload)

        assert status == 500
        assert body == {
            'type': 'error',
            'code': 'SUMMARY_GENERATION_FAILED',
            'message': 'An unexpected error occurred. Please try again.',
        }


# ===================================================================
# Download
# ===================================================================

class TestSummaryDownload:

    def test_text_attachment(self, api_client, sample_dental_payload):
        api_client.put(
            '/api/settings/',
            data=json.dumps({'clinic_name': 'Smile Dental', 'doctor_name': 'Dr. Priya Sharma'}),
            content_type='application/json',
        )
        response = api_client.post(
            '/api/opd/dental/summary/download',
            data=json.dumps(sample_dental_payload),
            content_type='application/json',
        )

        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/plain')
        assert response['Content-Disposition'] == 'attachment; filename="opd-summary-John_Doe.txt"'
        content = response.content.decode('utf-8')
        assert content.startswith('Smile Dental\n')
        assert 'Tooth Chart Notes\n  #UR8: missing, #LL3: mobile' in content

    def test_invalid_form_returns_json_error(self, api_client):
        response = api_client.post(
            '/api/opd/dental/summary/download', data=json.dumps({}), content_type='application/json',
        )
        assert response.status_code == 400
        assert json.loads(response.content)['type'] == 'validation_error'
