import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('due_date', models.DateField(db_index=True)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('urgent', 'Urgent')], db_index=True, default='medium', max_length=10)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In Progress'), ('completed', 'Completed'), ('overdue', 'Overdue'), ('cancelled', 'Cancelled')], db_index=True, default='pending', max_length=15)),
                ('recurring', models.CharField(choices=[('none', 'None'), ('daily', 'Daily'), ('weekly', 'Weekly'), ('fortnightly', 'Fortnightly'), ('monthly', 'Monthly'), ('quarterly', 'Quarterly'), ('half_yearly', 'Half Yearly'), ('yearly', 'Yearly')], db_index=True, default='none', max_length=15)),
                ('recurring_days', models.JSONField(blank=True, default=list, help_text='Weekday codes 0=Mon..6=Sun; used when recurring is daily')),
                ('attachment_required', models.BooleanField(default=False)),
                ('attachment_type', models.CharField(blank=True, choices=[('media', 'Media'), ('text', 'Text')], max_length=10)),
                ('attachment_description', models.CharField(blank=True, max_length=255)),
                ('attachment_url', models.URLField(blank=True, max_length=500)),
                ('attachment_text', models.TextField(blank=True)),
                ('assigned_to_name', models.CharField(blank=True, max_length=150)),
                ('assigned_to_city', models.CharField(blank=True, max_length=100)),
                ('assigned_by_name', models.CharField(blank=True, max_length=150)),
                ('is_holiday', models.BooleanField(default=False, help_text='Due date was a known holiday when the task was created')),
                ('audit_status', models.CharField(choices=[('pending', 'Pending'), ('audited', 'Audited'), ('bogus', 'Bogus'), ('unclear', 'Unclear')], default='pending', max_length=10)),
                ('audited_at', models.DateTimeField(blank=True, null=True)),
                ('audited_by', models.CharField(blank=True, max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('assigned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_tasks', to=settings.AUTH_USER_MODEL)),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_tasks', to=settings.AUTH_USER_MODEL)),
                ('parent_task', models.ForeignKey(blank=True, help_text='Recurring template this instance was generated from', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='instances', to='tasks.task')),
            ],
            options={
                'verbose_name': 'task',
                'verbose_name_plural': 'tasks',
                'ordering': ['-updated_at'],
                'indexes': [
                    models.Index(fields=['assigned_to', 'status'], name='tasks_assignee_status_idx'),
                    models.Index(fields=['assigned_by', 'status'], name='tasks_assigner_status_idx'),
                    models.Index(fields=['due_date', 'status'], name='tasks_due_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('parent_task', 'due_date'), name='unique_instance_per_template_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RemovalRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('task_title', models.CharField(max_length=255)),
                ('requested_by_name', models.CharField(blank=True, max_length=150)),
                ('reason', models.TextField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=10)),
                ('resolved_at', models.DateTimeField(blank=True, null=True)),
                ('resolved_by', models.CharField(blank=True, max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('requested_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='removal_requests', to=settings.AUTH_USER_MODEL)),
                ('task', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='removal_requests', to='tasks.task')),
            ],
            options={
                'verbose_name': 'removal request',
                'verbose_name_plural': 'removal requests',
                'ordering': ['-created_at'],
            },
        ),
    ]
