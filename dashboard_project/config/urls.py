from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('datasets/', include('datasets.urls')),
    path('analytics/', include('analytics.urls')),
]
