import django.db.models.deletion
from django.db import migrations, models

import folio.lib.fields
import folio.lib.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContentObject',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('Article', 'Article'), ('Audio', 'Audio'), ('Block', 'Block'), ('Collection', 'Collection'), ('Download', 'Download'), ('Image', 'Image'), ('Static', 'Static'), ('Tag', 'Tag'), ('Video', 'Video')], help_text='Which kind of content this row holds.', max_length=20)),
                ('title', folio.lib.fields.MultiCollationCharField(blank=True, db_collations={'mysql': 'utf8mb4_unicode_ci', 'sqlite': 'NOCASE'}, default='', max_length=255)),
                ('teaser', folio.lib.fields.MultiCollationTextField(blank=True, db_collations={'mysql': 'utf8mb4_unicode_ci', 'sqlite': 'NOCASE'}, default='', help_text='Short HTML summary.')),
                ('description', folio.lib.fields.MultiCollationTextField(blank=True, db_collations={'mysql': 'utf8mb4_unicode_ci', 'sqlite': 'NOCASE'}, default='', help_text='Full HTML body.')),
                ('media', models.CharField(blank=True, default='', max_length=255)),
                ('format', models.CharField(blank=True, default='', help_text='Mimetype of the media file.', max_length=255)),
                ('file_size', models.PositiveIntegerField(default=0, help_text='Media file size in bytes.')),
                ('creator', folio.lib.fields.MultiCollationCharField(blank=True, db_collations={'mysql': 'utf8mb4_unicode_ci', 'sqlite': 'NOCASE'}, default='', max_length=255)),
                ('image', models.CharField(blank=True, default='', max_length=255)),
                ('caption', folio.lib.fields.MultiCollationCharField(blank=True, db_collations={'mysql': 'utf8mb4_unicode_ci', 'sqlite': 'NOCASE'}, default='', max_length=255)),
                ('date', models.DateField(blank=True, help_text='Publication date.', null=True)),
                ('parent', models.PositiveIntegerField(default=0)),
                ('language', models.CharField(blank=True, default='', max_length=16)),
                ('rights', models.PositiveSmallIntegerField(blank=True, default=1, null=True)),
                ('publisher', folio.lib.fields.MultiCollationCharField(blank=True, db_collations={'mysql': 'utf8mb4_unicode_ci', 'sqlite': 'NOCASE'}, default='', max_length=255)),
                ('online', models.BooleanField(default=True)),
                ('submission_time', models.DateTimeField(validators=[folio.lib.validators.validate_utc_datetime])),
                ('last_updated', models.DateTimeField(blank=True, null=True, validators=[folio.lib.validators.validate_utc_datetime])),
                ('expires_on', models.DateTimeField(blank=True, null=True, validators=[folio.lib.validators.validate_utc_datetime])),
                ('counter', models.PositiveIntegerField(default=0, help_text='View count.')),
                ('meta_title', models.CharField(blank=True, default='', max_length=255)),
                ('meta_description', models.CharField(blank=True, default='', max_length=255)),
                ('seo', models.CharField(blank=True, default='', help_text='URL slug.', max_length=255)),
            ],
            options={
                'verbose_name': 'Content object',
                'verbose_name_plural': 'Content objects',
                'indexes': [
                    models.Index(fields=['type', 'online'], name='folio_content_type_online'),
                    models.Index(fields=['date', 'submission_time'], name='folio_content_date_subtime'),
                    models.Index(fields=['parent'], name='folio_content_parent'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Taglink',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content_type', models.CharField(choices=[('Article', 'Article'), ('Audio', 'Audio'), ('Block', 'Block'), ('Collection', 'Collection'), ('Download', 'Download'), ('Image', 'Image'), ('Static', 'Static'), ('Tag', 'Tag'), ('Video', 'Video')], max_length=20)),
                ('content', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='taglinks', to='folio_content.contentobject')),
                ('tag', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tagged', to='folio_content.contentobject')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['tag', 'content_type'], name='folio_taglink_tag_type'),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name='taglink',
            constraint=models.UniqueConstraint(fields=('content', 'tag'), name='folio_taglink_uniq_content_tag'),
        ),
    ]
