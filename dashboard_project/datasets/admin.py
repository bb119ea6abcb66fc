from django.contrib import admin
from .models import DatasetUpload


@admin.register(DatasetUpload)
class DatasetUploadAdmin(admin.ModelAdmin):
    list_display = ['name', 'file_type', 'row_count', 'column_count', 'uploaded_by', 'created_at']
    list_filter = ['file_type']
    search_fields = ['name', 'uploaded_by']
    readonly_fields = [
        'dataset_id', 'created_at', 'row_count', 'column_count',
        'numeric_columns', 'string_columns', 'statistics',
    ]
