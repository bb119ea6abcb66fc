from django.db import models


class DatasetUpload(models.Model):
    """
    History entry for a successfully ingested file.
    
    The rows themselves live only in the session's data store; this keeps
    the summary shown in the upload history.
    
    Attributes:
        dataset_id: Identifier handed out at ingestion time
        name: Original file name
        file_type: Extension of the uploaded file
        file_size: Size of the upload in bytes
        row_count: Number of rows
        column_count: Number of columns
        numeric_columns: JSON list of numeric column names
        string_columns: JSON list of text column names
        statistics: JSON per-column summary
        uploaded_by: Username of the uploader, blank for anonymous sessions
        created_at: Timestamp of the upload
    """
    
    FILE_TYPE_CHOICES = [
        ('csv', 'CSV'),
        ('xlsx', 'Excel (xlsx)'),
        ('xls', 'Excel (xls)'),
    ]
    
    dataset_id = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    file_type = models.CharField(
        max_length=10,
        choices=FILE_TYPE_CHOICES,
        default='csv'
    )
    file_size = models.BigIntegerField(default=0)
    row_count = models.IntegerField(default=0)
    column_count = models.IntegerField(default=0)
    numeric_columns = models.JSONField(default=list)
    string_columns = models.JSONField(default=list)
    statistics = models.JSONField(default=dict)
    uploaded_by = models.CharField(max_length=150, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = 'Dataset upload'
        verbose_name_plural = 'Dataset uploads'
    
    def __str__(self):
        return f"{self.name} ({self.row_count} rows)"
    
    def to_summary(self) -> dict:
        """Serializable summary used by the history endpoint."""
        return {
            'id': self.dataset_id,
            'name': self.name,
            'rows': self.row_count,
            'columns': self.column_count,
            'size': self.file_size,
            'uploadDate': self.created_at.isoformat(),
            'analytics': {
                'totalRows': self.row_count,
                'totalColumns': self.column_count,
                'numericColumns': self.numeric_columns,
                'stringColumns': self.string_columns,
            },
        }
