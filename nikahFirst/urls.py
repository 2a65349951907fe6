from django.contrib import admin
from django.urls import path, include
from django.conf import settings

urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/auth/', include('authDesk.urls')),
    path('api/', include('accountDesk.urls')),
    path('api/', include('subscriptionDesk.urls')),
    path('api/', include('walletDesk.urls')),
    path('api/', include('topupDesk.urls')),
]

if settings.ENABLE_DEBUG_TOOLBAR:
    import debug_toolbar
    urlpatterns = [path('__debug__/', include(debug_toolbar.urls))] + urlpatterns
