"""
Catalog — Management Command: seed_catalog

Creates the default color palette (with swatch hex codes) and the
common units of measure.

Usage::

    python manage.py seed_catalog

Idempotent: safe to re-run (uses get_or_create). Existing colors keep
their name but get the default hex code if they have none.

@file catalog/management/commands/seed_catalog.py
"""

import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import Color, Unit

logger = logging.getLogger('waretrack')

DEFAULT_COLORS = {
    'Black': '#000000',
    'Blue': '#2563EB',
    'Brown': '#92400E',
    'Green': '#16A34A',
    'Red': '#DC2626',
    'Transparent': '#E5E7EB',
    'White': '#FFFFFF',
    'Yellow': '#EAB308',
    'One color': '#6B7280',
}

DEFAULT_UNITS = ['Piece', 'Meter', 'Roll', 'Box', 'Packet']


class Command(BaseCommand):
    help = 'Seed the default colors and units of measure.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-units',
            action='store_true',
            help='Only seed colors.',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        colors_created = 0
        for name, hex_code in DEFAULT_COLORS.items():
            color, created = Color.objects.get_or_create(
                name=name, defaults={'hex_code': hex_code},
            )
            if created:
                colors_created += 1
            elif not color.hex_code:
                color.hex_code = hex_code
                color.save(update_fields=['hex_code', 'updated_at'])

        units_created = 0
        if not options['skip_units']:
            for name in DEFAULT_UNITS:
                _, created = Unit.objects.get_or_create(name=name)
                units_created += int(created)

        logger.info('seed_catalog: %d colors, %d units created', colors_created, units_created)
        self.stdout.write(self.style.SUCCESS(
            f'Done. Colors created: {colors_created}, Units created: {units_created}'
        ))
