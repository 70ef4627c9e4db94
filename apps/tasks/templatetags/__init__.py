"""
Template tags package for tasks app.

Provides custom template tags and filters for task display:
- is_overdue: Open task whose due date has passed
- status_class / priority_class / audit_class: Badge colors
- task_row_class: Row background for overdue and holiday tasks
- weekdays: Weekday labels of a daily recurring template
"""
