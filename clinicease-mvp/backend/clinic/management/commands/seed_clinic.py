from django.core.management.base import BaseCommand

from clinic.fixtures import seed_clinic


class Command(BaseCommand):
    help = "Load demo doctors, patients and today's appointments (idempotent)."

    def handle(self, *args, **options):
        created = seed_clinic()
        self.stdout.write(self.style.SUCCESS(
            "Seeded {doctors} doctors, {patients} patients, {appointments} appointments.".format(**created)
        ))
