from django.contrib import admin

from .models import Order, OrderAttachment, OrderItem, PrintStore, Service


class ServiceInline(admin.TabularInline):
    model = Service
    extra = 0
    fields = ('name', 'base_price', 'unit', 'currency', 'is_active')


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ('service_name', 'quantity', 'selected_options', 'unit_price', 'total_price')
    readonly_fields = ('service_name', 'quantity', 'selected_options', 'unit_price', 'total_price')
    can_delete = False


class OrderAttachmentInline(admin.TabularInline):
    model = OrderAttachment
    extra = 0
    fields = ('kind', 'filename', 'mime_type', 'size', 'storage_key')
    readonly_fields = ('kind', 'filename', 'mime_type', 'size', 'storage_key')
    can_delete = False


@admin.register(PrintStore)
class PrintStoreAdmin(admin.ModelAdmin):
    list_display = ('name', 'owner', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name', 'owner__email')
    inlines = [ServiceInline]


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ('name', 'store', 'base_price', 'currency', 'is_active')
    list_filter = ('is_active', 'currency')
    search_fields = ('name', 'store__name')


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'store', 'customer', 'status', 'payment_status', 'subtotal', 'created_at')
    list_filter = ('status', 'payment_status', 'store')
    search_fields = ('id', 'customer__email', 'guest_id')
    readonly_fields = (
        'subtotal', 'pickup_token', 'pickup_token_expires_at', 'pickup_verified_at',
        'processing_at', 'ready_at', 'completed_at', 'cancelled_at', 'receipt_issued_at',
        'created_at', 'updated_at',
    )
    inlines = [OrderItemInline, OrderAttachmentInline]

    fieldsets = (
        (None, {
            'fields': ('store', 'customer', 'guest_id', 'notes', 'status', 'subtotal', 'currency')
        }),
        ('Payment', {
            'fields': ('payment_status', 'payment_amount', 'payment_method', 'change_given', 'receipt_issued_at')
        }),
        ('Down payment', {
            'fields': (
                'down_payment_required', 'down_payment_amount', 'down_payment_method',
                'down_payment_reference', 'down_payment_paid_at',
            ),
            'classes': ('collapse',)
        }),
        ('Pickup', {
            'fields': ('pickup_token', 'pickup_token_expires_at', 'pickup_verified_at')
        }),
        ('Timestamps', {
            'fields': (
                'processing_at', 'ready_at', 'completed_at', 'cancelled_at', 'created_at', 'updated_at',
            ),
            'classes': ('collapse',)
        }),
    )
