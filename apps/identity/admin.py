from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['username', 'email', 'name', 'role', 'created_at']
    list_filter = ['role']
    search_fields = ['username', 'email', 'name']
    exclude = ['password']
