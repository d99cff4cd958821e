"""Records application for the hospital backend.

This package holds the department registers (maternity appointments,
deliveries, family planning, prenatal consultations and medicine
hospitalizations) together with the views, serializers and services
that expose them through the JSON API.
"""
