from django.core.management.base import BaseCommand
from django.db import transaction

from domain.bom.numbering import parse_bom_number, sequence_scope


class Command(BaseCommand):
    help = (
        "Raises every BOM number counter (BOMSequence) to at least the highest "
        "sequence already used by stored documents of the same day. "
        "Safe to re-run: counters are never lowered and documents are not touched."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only report what would change.',
        )

    def handle(self, *args, **options):
        from infrastructure.persistence.models import BOMDocument, BOMSequence

        highest = {}
        skipped = 0
        for bom_number in BOMDocument.objects.values_list('bom_number', flat=True).iterator():
            parsed = parse_bom_number(bom_number)
            if parsed is None:
                skipped += 1
                continue
            key = sequence_scope(parsed.on)
            highest[key] = max(highest.get(key, 0), parsed.sequence)

        if skipped:
            self.stdout.write(self.style.WARNING(f'Skipped {skipped} document(s) with unrecognised numbers.'))

        if not highest:
            self.stdout.write(self.style.SUCCESS('No BOM numbers found, nothing to do.'))
            return

        raised = 0
        with transaction.atomic():
            for key, value in sorted(highest.items()):
                sequence, _ = BOMSequence.objects.select_for_update().get_or_create(key=key)
                if sequence.last_value >= value:
                    continue
                raised += 1
                self.stdout.write(f'{key}: {sequence.last_value} -> {value}')
                if not options['dry_run']:
                    sequence.last_value = value
                    sequence.save(update_fields=['last_value'])
            if options['dry_run']:
                transaction.set_rollback(True)

        verb = 'Would raise' if options['dry_run'] else 'Raised'
        self.stdout.write(self.style.SUCCESS(f'{verb} {raised} of {len(highest)} counter(s).'))
