from django.contrib import admin

from .models import Category, Game, GameImage


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name",)


class GameImageInline(admin.TabularInline):
    model = GameImage
    extra = 0


@admin.register(Game)
class GameAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "category", "approval_status", "is_active", "stock", "available_stock")
    list_filter = ("approval_status", "is_active", "category")
    search_fields = ("name", "owner__email")
    readonly_fields = ("approved_by", "approved_at")
    inlines = [GameImageInline]
