from django.urls import path
from . import views

app_name = 'datasets'

urlpatterns = [
    path('api/upload/', views.api_upload, name='api_upload'),
    path('api/current/', views.api_current, name='api_current'),
    path('api/clear/', views.api_clear, name='api_clear'),
    path('api/history/', views.api_history, name='api_history'),
    path('api/context/', views.api_context, name='api_context'),
]
