from django.urls import path
from . import views

app_name = "reports"

urlpatterns = [
    path('', views.report_list, name='report_list'),
    path('export/', views.report_export, name='report_export'),
    path('<int:pk>/resend/', views.report_resend, name='report_resend'),
]
