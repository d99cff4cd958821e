"""
User administration views (admin role only).

Administrators create staff accounts bound to a department and switch
accounts on or off; department membership then decides which registers
a user can open.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Department, User
from records.permissions import IsAdminRole
from records.serializers.users import (
    UserActiveSerializer,
    UserCreateSerializer,
    UserDepartmentSerializer,
    UserListQuerySerializer,
    UserUpdateSerializer,
)
from records.services.users import (
    assign_department,
    create_staff_user,
    get_user_or_404,
    remove_department,
    serialize_department,
    serialize_user,
    set_user_active,
    update_staff_user,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def list_users(request):
    q = UserListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = User.objects.prefetch_related('departments').order_by('-date_joined', '-id')
    search = (q.validated_data.get('search') or '').strip()
    if search:
        qs = qs.filter(Q(username__icontains=search) | Q(first_name__icontains=search)
                       | Q(last_name__icontains=search) | Q(email__icontains=search))
    if q.validated_data.get('role'):
        qs = qs.filter(role=q.validated_data['role'])
    if q.validated_data.get('department'):
        qs = qs.filter(departments__slug=q.validated_data['department'])
    return Response({'ok': True, 'data': [serialize_user(u) for u in qs]})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def create_user(request):
    s = UserCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user = create_staff_user(
        request.user,
        username=v['username'],
        password=v['password'],
        full_name=v['fullName'],
        email=v.get('email') or '',
        phone_number=v.get('phoneNumber') or '',
        role=v['role'],
        department_slug=v['department'],
    )
    return Response({'ok': True, 'data': serialize_user(user)}, status=201)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk: int):
    user = get_user_or_404(pk)
    if request.method == 'PATCH':
        s = UserUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = update_staff_user(request.user, user, s.validated_data)
    return Response({'ok': True, 'data': serialize_user(user)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_departments(request, pk: int):
    """Add the user to one more department."""
    s = UserDepartmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = assign_department(request.user, get_user_or_404(pk), s.validated_data['department'])
    return Response({'ok': True, 'data': serialize_user(user)}, status=201)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_department_remove(request, pk: int, slug: str):
    user = remove_department(request.user, get_user_or_404(pk), slug)
    return Response({'ok': True, 'data': serialize_user(user)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def set_active(request, pk: int):
    s = UserActiveSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = set_user_active(request.user, get_user_or_404(pk), s.validated_data['isActive'])
    return Response({'ok': True, 'data': serialize_user(user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def departments(request):
    return Response({'ok': True, 'data': [serialize_department(d) for d in Department.objects.order_by('name')]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """Profile of the calling user, with the departments it can open."""
    return Response({'ok': True, 'data': serialize_user(request.user)})
