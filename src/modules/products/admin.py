from django.contrib import admin

from modules.products.models import Product, ProductCategory


class ProductCategoryInline(admin.TabularInline):
    model = ProductCategory
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "price", "quantity"]
    search_fields = ["name"]
    inlines = [ProductCategoryInline]
