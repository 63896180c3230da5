from django.urls import path
from . import views

app_name = "certificates"

urlpatterns = [
    path('', views.certificate_list, name='list'),
    path('issue/', views.issue_certificate, name='issue'),
    path('import/', views.import_certificates, name='import'),
    path('<int:pk>/', views.certificate_detail, name='detail'),
    path('<int:pk>/download/', views.download_certificate, name='download'),
    path('<int:pk>/download/png/', views.download_certificate_png, name='download_png'),
    path('verify/<str:certificate_id>/', views.verify_certificate, name='verify'),
    path('<str:certificate_id>/revoke/', views.revoke_certificate, name='revoke'),
]
