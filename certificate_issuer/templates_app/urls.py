from django.urls import path
from . import views

app_name = "templates_app"

urlpatterns = [
    path('', views.template_list, name='template_list'),
    path('create/', views.template_create, name='template_create'),
    path('<int:pk>/', views.template_detail, name='template_detail'),
    path('<int:pk>/background/', views.template_upload_background, name='template_background'),
    path('<int:pk>/configuration/', views.template_configure, name='template_configure'),
    path('<int:pk>/default/', views.template_set_default, name='template_set_default'),
    path('<int:pk>/delete/', views.template_delete, name='template_delete'),
]
