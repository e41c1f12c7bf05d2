from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.permissions import IsDormAdmin
from audit.helpers import log_action, log_payment_status
from audit.models import AuditLog
from core.dto import PaymentDTO, PaymentPatchDTO
from core.exceptions import PermissionDeniedError, NotFoundError
from applications.repositories import ApplicationRepository
from .serializers import PaymentSerializer, PaymentCreateSerializer, PaymentUpdateSerializer, MarkPaidSerializer
from .services import PaymentService


class PaymentViewSet(viewsets.ViewSet):
    """
    ViewSet for dormitory payments.

    Administrators create, update and settle payments and run the overdue
    sweep; students read their own payments.
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    # An unknown application in the request body is a bad request
    bad_request_on_not_found = ('create',)

    student_actions = ('retrieve', 'my', 'by_application')

    def get_permissions(self):
        if self.action in self.student_actions:
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsDormAdmin()]

    @staticmethod
    def _envelope(payments):
        data = PaymentSerializer(payments, many=True).data
        return Response({'payments': data, 'count': len(data)})

    def list(self, request):
        """All payments, optionally filtered by ?status="""
        service = PaymentService()
        status_filter = request.query_params.get('status')
        if status_filter:
            return self._envelope(service.list_by_status(status_filter))
        return self._envelope(service.list_all())

    def create(self, request):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = PaymentService().create_payment(PaymentDTO(**serializer.validated_data))
        log_action(
            user=request.user,
            action=AuditLog.ACTION_CREATE,
            resource_type=AuditLog.RESOURCE_PAYMENT,
            resource_id=payment.id,
            description=f"Created payment {payment.period} for application #{payment.application_id}",
            request=request,
            metadata={'amount': str(payment.amount), 'period': payment.period},
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        payment = PaymentService().get_payment(pk)
        if payment.application.user_id != request.user.id and not request.user.is_dorm_admin:
            raise PermissionDeniedError("Payment does not belong to user")
        return Response(PaymentSerializer(payment).data)

    def update(self, request, pk=None):
        serializer = PaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = PaymentService().update_payment(pk, PaymentPatchDTO(**serializer.validated_data))
        return Response(PaymentSerializer(payment).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        PaymentService().delete_payment(pk)
        log_action(
            user=request.user,
            action=AuditLog.ACTION_DELETE,
            resource_type=AuditLog.RESOURCE_PAYMENT,
            resource_id=int(pk),
            description=f"Deleted payment #{pk}",
            request=request,
        )
        return Response({'message': 'Payment deleted successfully'}, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'], url_path='mark-paid')
    def mark_paid(self, request, pk=None):
        """Body: {"paid_at": <optional ISO datetime>}"""
        serializer = MarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = PaymentService()
        old_status = service.get_payment(pk).status
        payment = service.mark_paid(pk, paid_at=serializer.validated_data.get('paid_at'))
        log_payment_status(request.user, payment, old_status, request=request)
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=['post'], url_path='mark-unpaid')
    def mark_unpaid(self, request, pk=None):
        service = PaymentService()
        old_status = service.get_payment(pk).status
        payment = service.mark_unpaid(pk)
        log_payment_status(request.user, payment, old_status, request=request)
        return Response(PaymentSerializer(payment).data)

    @action(detail=False, methods=['post'], url_path='sweep-overdue')
    def sweep_overdue(self, request):
        """Move pending payments past their due date to overdue"""
        updated = PaymentService().sweep_overdue()
        return Response({'message': 'Overdue payments updated', 'updated_count': updated})

    @action(detail=False, methods=['get'])
    def my(self, request):
        return self._envelope(PaymentService().list_by_user(request.user.id))

    @action(detail=False, methods=['get'], url_path=r'room/(?P<room_id>\d+)')
    def by_room(self, request, room_id=None):
        return self._envelope(PaymentService().list_by_room(room_id))

    @action(detail=False, methods=['get'], url_path=r'application/(?P<application_id>\d+)')
    def by_application(self, request, application_id=None):
        application = ApplicationRepository().get_by_id(application_id)
        if not application:
            raise NotFoundError(resource_type="Application", resource_id=application_id)
        if application.user_id != request.user.id and not request.user.is_dorm_admin:
            raise PermissionDeniedError("Application does not belong to user")
        return self._envelope(PaymentService().list_by_application(application_id))

    @action(detail=False, methods=['get'], url_path=r'status/(?P<payment_status>[a-z]+)')
    def by_status(self, request, payment_status=None):
        return self._envelope(PaymentService().list_by_status(payment_status))

    @action(detail=False, methods=['get'])
    def search(self, request):
        """
        Case-insensitive prefix search on the student index number.

        Query params:
        - index: index number prefix
        - status: optional payment status
        """
        return self._envelope(PaymentService().search_by_index(
            request.query_params.get('index', ''),
            request.query_params.get('status') or None,
        ))
