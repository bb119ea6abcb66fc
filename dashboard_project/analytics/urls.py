from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    path('api/summary/', views.api_summary, name='api_summary'),
    path('api/chart-data/', views.api_chart_data, name='api_chart_data'),
    path('api/column/', views.api_column, name='api_column'),
    path('api/chart/', views.api_chart, name='api_chart'),
]
