import uuid
from django.db import models


SEX_CHOICES = [
    ('Male', 'Male'),
    ('Female', 'Female'),
    ('Other', 'Other'),
]


class Doctor(models.Model):
    id = models.CharField(primary_key=True, max_length=20)
    uid = models.CharField(max_length=128, blank=True)  # identity provider user id
    name = models.CharField(max_length=200)
    qualification = models.CharField(max_length=200, blank=True)
    registration_id = models.CharField(max_length=50, blank=True)

    class Meta:
        db_table = 'doctors'
        ordering = ['name']


class Patient(models.Model):
    id = models.CharField(primary_key=True, max_length=20)
    name = models.CharField(max_length=200)
    age = models.PositiveIntegerField(blank=True, null=True)
    sex = models.CharField(max_length=10, choices=SEX_CHOICES, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    address = models.CharField(max_length=300, blank=True)
    email = models.CharField(max_length=200, blank=True)
    govt_id = models.CharField(max_length=50, blank=True)
    avatar_url = models.CharField(max_length=300, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'patients'


class Appointment(models.Model):
    STATUS_CHOICES = [
        ('upcoming', 'Upcoming'),
        ('finished', 'Finished'),
        ('cancelled', 'Cancelled'),
    ]
    PRIORITY_CHOICES = [
        ('High', 'High'),
        ('Medium', 'Medium'),
        ('Low', 'Low'),
    ]

    id = models.CharField(primary_key=True, max_length=20)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='appointments')
    patient_name = models.CharField(max_length=200)
    date_time = models.DateTimeField()
    reason = models.TextField()
    notes = models.TextField(blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='Medium')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='upcoming')
    duration_minutes = models.PositiveIntegerField(default=30)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointments'
        ordering = ['date_time']


class PrescriptionDraft(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('processing', 'Processing'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    speech_input = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    prescription_table = models.TextField(blank=True)
    llm_model = models.CharField(max_length=50, blank=True, null=True)
    error_message = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'prescription_drafts'
