from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, HiddenField
from wtforms.validators import Length, Optional, URL

from app.models.article import ArticleDraft

class ArticleForm(FlaskForm):
    """
    文章编辑表单
    这里只做长度校验：草稿允许任意字段为空，提交审核的必填校验在投稿服务中完成。
    """
    title = StringField('Title', validators=[Optional(), Length(max=200)])
    slug = StringField('Slug', validators=[Optional(), Length(max=200)])
    excerpt = TextAreaField('Excerpt', validators=[Optional(), Length(max=500)])
    # content 存储富文本编辑器生成的 HTML
    content = HiddenField('Content')
    featured_image = StringField('Featured image URL', validators=[Optional(), URL(), Length(max=512)])
    category_id = SelectField('Category', choices=[], validate_choice=False)
    tags = StringField('Tags', validators=[Optional(), Length(max=300)],
                       description='Comma separated')
    meta_title = StringField('SEO title', validators=[Optional(), Length(max=200)])
    meta_description = TextAreaField('SEO description', validators=[Optional(), Length(max=300)])

    def set_categories(self, categories):
        self.category_id.choices = [('', 'Select a category')] + [
            (str(c.get('id')), c.get('name') or str(c.get('id'))) for c in categories
        ]

    def load_draft(self, draft):
        self.title.data = draft.title
        self.slug.data = draft.slug
        self.excerpt.data = draft.excerpt
        self.content.data = draft.content
        self.featured_image.data = draft.featured_image
        self.category_id.data = draft.category_id
        self.tags.data = ', '.join(draft.tags)
        self.meta_title.data = draft.meta_title
        self.meta_description.data = draft.meta_description

    def to_draft(self, article_id=None):
        tags = [t.strip() for t in (self.tags.data or '').split(',') if t.strip()]
        return ArticleDraft(
            id=article_id,
            title=(self.title.data or '').strip(),
            slug=(self.slug.data or '').strip(),
            excerpt=self.excerpt.data or '',
            content=self.content.data or '',
            featured_image=self.featured_image.data or '',
            category_id=self.category_id.data or '',
            tags=tags,
            meta_title=self.meta_title.data or '',
            meta_description=self.meta_description.data or '',
        )
