# operations/urls.py
from django.urls import path
from . import views


app_name = 'operations'

urlpatterns = [
    # ====== Lifecycle ======
    path('users/<int:user_id>/operations/', views.user_operations, name='user_operations'),
    path('users/<int:user_id>/operations/bulk-update/', views.bulk_update_operations, name='bulk_update'),
    path('users/<int:user_id>/operations/summary/', views.operations_summary, name='summary'),
    path('users/<int:user_id>/operations/<int:index>/', views.update_operation, name='update_operation'),
    path('users/<int:user_id>/confirm-payment/', views.confirm_payment, name='confirm_payment'),
    path('users/<int:user_id>/bulk-confirm-payment/', views.bulk_confirm_payment, name='bulk_confirm_payment'),
    path('users/<int:user_id>/payment-confirmations/', views.payment_confirmations, name='payment_confirmations'),

    # ====== Recording ======
    path('users/service-operations/', views.WorkerOperationsView.as_view(), name='worker_operations'),
    path('admin/service-operations/', views.AdminOperationsView.as_view(), name='admin_operations'),
    path('admin/service-operations/<str:uid>/', views.AdminOperationDetailView.as_view(), name='admin_operation_detail'),

    # ====== Reports ======
    path('report/branch/<int:branch_id>/', views.branch_report_view, name='branch_report'),
    path('report/worker/<int:user_id>/', views.worker_report_view, name='worker_report'),
]
