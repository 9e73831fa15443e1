"""
Report denormalized counters that no longer match their source rows.

    python manage.py counter_drift
    python manage.py counter_drift --fail

Nothing is rewritten; the report is for an operator to act on.
"""

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Count, F, Q

from campus.models import Comment, Group, Post


# (model, counter field, annotation computing the true value)
CHECKS = [
    (Post, 'likes_count', Count('likes', distinct=True)),
    (Post, 'comments_count', Count('comments', filter=Q(comments__parent_comment__isnull=True), distinct=True)),
    (Comment, 'likes_count', Count('likes', distinct=True)),
    (Comment, 'replies_count', Count('replies', distinct=True)),
    (Group, 'member_count', Count('members', filter=Q(members__status='approved'), distinct=True)),
]


def find_counter_drift():
    """Yield (label, pk, field, stored, actual) for every mismatched counter."""
    for model, field, actual in CHECKS:
        rows = (
            model.objects.annotate(actual=actual)
            .exclude(**{field: F('actual')})
            .values_list('pk', field, 'actual')
            .order_by('pk')
        )
        for pk, stored, true_value in rows:
            yield model._meta.label, pk, field, stored, true_value


class Command(BaseCommand):
    help = "Report likes/comments/replies/member counters that differ from their rows."

    def add_arguments(self, parser):
        parser.add_argument(
            '--fail',
            action='store_true',
            help="Exit with an error when any drift is found.",
        )

    def handle(self, *args, **options):
        drift = list(find_counter_drift())
        for label, pk, field, stored, actual in drift:
            self.stdout.write(f"{label} {pk} {field}: stored={stored} actual={actual}")

        if not drift:
            self.stdout.write(self.style.SUCCESS("No counter drift found."))
            return

        self.stdout.write(self.style.WARNING(f"{len(drift)} drifted counter(s)."))
        if options['fail']:
            raise CommandError("Counter drift detected")
