from django.contrib import admin

# Branding for the SITA admin site
admin.site.site_title = 'SITA Admin'
admin.site.site_header = 'SITA Administration'
admin.site.index_title = 'Dashboard'
