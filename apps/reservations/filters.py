"""FilterSet definitions for the review console."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Reservation


class ConsoleReservationFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Reservation.Status.choices)
    building_id = django_filters.UUIDFilter(field_name="room__building_id")
    floor_no = django_filters.NumberFilter(field_name="room__floor_no")
    room_id = django_filters.UUIDFilter(field_name="room_id")
    applicant_id = django_filters.NumberFilter(field_name="applicant_id")
    to = django_filters.IsoDateTimeFilter(field_name="start_at", lookup_expr="lt")
    q = django_filters.CharFilter(method="filter_applicant")

    class Meta:
        model = Reservation
        fields = ["status", "building_id", "floor_no", "room_id", "applicant_id"]

    def filter_applicant(self, queryset, name, value):  # type: ignore
        term = value.strip()
        if not term:
            return queryset
        return queryset.filter(
            Q(applicant__username__icontains=term)
            | Q(applicant__first_name__icontains=term)
            | Q(applicant__last_name__icontains=term)
            | Q(applicant__student_number__icontains=term)
        )


# "from" is a keyword, so it cannot be declared in the class body.
ConsoleReservationFilterSet.base_filters["from"] = django_filters.IsoDateTimeFilter(
    field_name="end_at", lookup_expr="gt"
)
