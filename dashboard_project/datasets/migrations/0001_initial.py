from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='DatasetUpload',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('dataset_id', models.CharField(max_length=64, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('file_type', models.CharField(choices=[('csv', 'CSV'), ('xlsx', 'Excel (xlsx)'), ('xls', 'Excel (xls)')], default='csv', max_length=10)),
                ('file_size', models.BigIntegerField(default=0)),
                ('row_count', models.IntegerField(default=0)),
                ('column_count', models.IntegerField(default=0)),
                ('numeric_columns', models.JSONField(default=list)),
                ('string_columns', models.JSONField(default=list)),
                ('statistics', models.JSONField(default=dict)),
                ('uploaded_by', models.CharField(blank=True, default='', max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Dataset upload',
                'verbose_name_plural': 'Dataset uploads',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
