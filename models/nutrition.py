"""
Nutrition Models

Contains the Food library, nutrition program templates (day -> meal -> item,
each level ordered within its parent) and reusable meal templates.
"""

from .base import db


class Food(db.Model):
    """Food in a coach's library, entered manually or imported from USDA."""
    id = db.Column(db.Integer, primary_key=True)
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    fdc_id = db.Column(db.Integer, nullable=True, index=True)
    name = db.Column(db.String(200), nullable=False)
    brand_owner = db.Column(db.String(200), nullable=True)
    serving_size_qty = db.Column(db.Float, nullable=False, default=100.0)
    serving_size_unit = db.Column(db.String(50), nullable=False, default='g')
    calories = db.Column(db.Float, nullable=False, default=0.0)
    protein_g = db.Column(db.Float, nullable=False, default=0.0)
    carbs_g = db.Column(db.Float, nullable=False, default=0.0)
    fat_g = db.Column(db.Float, nullable=False, default=0.0)
    fiber_g = db.Column(db.Float, nullable=True)
    sugar_g = db.Column(db.Float, nullable=True)
    sodium_mg = db.Column(db.Float, nullable=True)
    source = db.Column(db.String(20), default='manual')  # 'manual' or 'usda'
    full_nutrients = db.Column(db.JSON, nullable=True)

    __table_args__ = (
        db.UniqueConstraint('coach_id', 'fdc_id', name='uq_food_coach_fdc'),
    )


class NutritionProgramTemplate(db.Model):
    """Multi-day nutrition program with macro target ranges."""
    id = db.Column(db.Integer, primary_key=True)
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True)
    calorie_target_type = db.Column(db.String(20), nullable=True)  # 'fixed' or 'deficit'
    min_calories = db.Column(db.Float, nullable=True)
    max_calories = db.Column(db.Float, nullable=True)
    min_protein_grams = db.Column(db.Float, nullable=True)
    max_protein_grams = db.Column(db.Float, nullable=True)
    min_carb_grams = db.Column(db.Float, nullable=True)
    max_carb_grams = db.Column(db.Float, nullable=True)
    min_fat_grams = db.Column(db.Float, nullable=True)
    max_fat_grams = db.Column(db.Float, nullable=True)
    min_sugar_grams = db.Column(db.Float, nullable=True)
    max_sugar_grams = db.Column(db.Float, nullable=True)
    target_meals_per_day = db.Column(db.Float, nullable=True)
    duration_value = db.Column(db.Float, nullable=True)
    duration_unit = db.Column(db.String(10), nullable=True)  # 'days', 'weeks' or 'months'
    supplements = db.Column(db.JSON, nullable=True)
    meals = db.relationship('NutritionProgramMeal', backref='program', lazy=True, cascade='all, delete-orphan')


class NutritionProgramMeal(db.Model):
    """Meal on one program day. There is no separate day row: a day exists while it has meals."""
    id = db.Column(db.Integer, primary_key=True)
    program_template_id = db.Column(db.Integer, db.ForeignKey('nutrition_program_template.id', ondelete='CASCADE'),
                                    nullable=False, index=True)
    day_number = db.Column(db.Integer, nullable=False)
    meal_name = db.Column(db.String(100), nullable=False)
    meal_order = db.Column(db.Integer, nullable=False)
    items = db.relationship('NutritionProgramMealItem', backref='meal', lazy=True,
                            cascade='all, delete-orphan', order_by='NutritionProgramMealItem.item_order')


class NutritionProgramMealItem(db.Model):
    """Food portion inside a program meal."""
    id = db.Column(db.Integer, primary_key=True)
    meal_id = db.Column(db.Integer, db.ForeignKey('nutrition_program_meal.id', ondelete='CASCADE'), nullable=False, index=True)
    food_id = db.Column(db.Integer, db.ForeignKey('food.id'), nullable=False, index=True)
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(50), nullable=False, default='serving')
    item_order = db.Column(db.Integer, nullable=False)
    food = db.relationship('Food')


class MealTemplate(db.Model):
    """Reusable meal whose items can be copied into program meals."""
    __tablename__ = 'meal_template'
    id = db.Column(db.Integer, primary_key=True)
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    items = db.relationship('MealItem', backref='meal_template', lazy=True,
                            cascade='all, delete-orphan', order_by='MealItem.sort_order')

    __table_args__ = (
        db.UniqueConstraint('coach_id', 'name', name='uq_meal_template_coach_name'),
    )


class MealItem(db.Model):
    """Food portion inside a meal template."""
    id = db.Column(db.Integer, primary_key=True)
    meal_id = db.Column(db.Integer, db.ForeignKey('meal_template.id', ondelete='CASCADE'), nullable=False, index=True)
    food_id = db.Column(db.Integer, db.ForeignKey('food.id'), nullable=False, index=True)
    quantity = db.Column(db.Float, nullable=False)
    sort_order = db.Column(db.Integer, nullable=False)
    food = db.relationship('Food')
